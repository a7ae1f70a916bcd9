"""
Console formatting and color utilities.
"""

from __future__ import annotations

from .levels import level_emoji
from .models import LogEntry, orjson_dumps

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "debug": "\033[36m",
    "info": "\033[32m",
    "warn": "\033[33m",
    "error": "\033[31m",
    "fatal": "\033[1;31m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Renders entries as `<emoji> [HH:MM:SS.mmm] LEVEL: message`."""

    # Slice of the ISO-8601 timestamp holding HH:MM:SS.mmm
    TIME_SLICE = slice(11, 23)
    STACK_PREFIX = "Stack trace: "

    @classmethod
    def format_header(cls, entry: LogEntry) -> str:
        clock = entry.timestamp[cls.TIME_SLICE]
        return f"{level_emoji(entry.level)} [{clock}] {entry.level_name}: {entry.message}"

    @staticmethod
    def format_data(data: object) -> str:
        if isinstance(data, str):
            return data
        try:
            return orjson_dumps(data)
        except TypeError:
            # orjson.JSONEncodeError, e.g. integers beyond 64 bits
            return repr(data)

    @classmethod
    def format(cls, entry: LogEntry, *, use_color: bool = False) -> str:
        """Format the first line of an entry: header plus payload when present."""
        header = cls.format_header(entry)
        if use_color:
            header = colorize(header, entry.level_name.lower())
        if entry.data is None:
            return header
        payload = cls.format_data(entry.data)
        if use_color:
            payload = colorize(payload, "dim")
        return f"{header} {payload}"

    @classmethod
    def format_stack(cls, entry: LogEntry) -> str | None:
        if not entry.stack:
            return None
        return f"{cls.STACK_PREFIX}{entry.stack}"
