"""
Log levels and their presentation attributes.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

UNKNOWN_LEVEL_NAME = "UNKNOWN"
UNKNOWN_LEVEL_EMOJI = "📝"

_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
    "EXCEPTION": "ERROR",
}

# stdlib numeric levels, highest first
_STDLIB_LEVELS = (
    (logging.CRITICAL, "FATAL"),
    (logging.ERROR, "ERROR"),
    (logging.WARNING, "WARN"),
    (logging.INFO, "INFO"),
)


class LogLevel(IntEnum):
    """Ordered severity levels. Comparison follows the numeric value."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    @classmethod
    def coerce(cls, value: Any) -> "LogLevel":
        """
        Convert a level given as LogLevel, int 0-4 or name.

        Raises:
            ValueError: the value does not name a known level
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if value in cls._value2member_map_:
                return cls(value)
        elif isinstance(value, str):
            name = value.strip().upper()
            name = _ALIASES.get(name, name)
            if name in cls.__members__:
                return cls[name]
            if name.isdigit():
                return cls.coerce(int(name))
        raise ValueError(f"Unknown log level: {value!r}")

    @classmethod
    def from_stdlib(cls, levelno: int) -> "LogLevel":
        """Map a stdlib `logging` level number; anything below INFO is DEBUG."""
        for threshold, name in _STDLIB_LEVELS:
            if levelno >= threshold:
                return cls[name]
        return cls.DEBUG


LEVEL_EMOJI = {
    LogLevel.DEBUG: "🐛",
    LogLevel.INFO: "ℹ️",
    LogLevel.WARN: "⚠️",
    LogLevel.ERROR: "❌",
    LogLevel.FATAL: "💀",
}

# Console channel per level; FATAL shares the error channel
LEVEL_CHANNEL = {
    LogLevel.DEBUG: "debug",
    LogLevel.INFO: "info",
    LogLevel.WARN: "warn",
    LogLevel.ERROR: "error",
    LogLevel.FATAL: "error",
}


def level_name(level: int) -> str:
    """Canonical display name, `UNKNOWN` for values outside the enum."""
    try:
        return LogLevel(level).name
    except ValueError:
        return UNKNOWN_LEVEL_NAME


def level_emoji(level: int) -> str:
    try:
        return LEVEL_EMOJI[LogLevel(level)]
    except ValueError:
        return UNKNOWN_LEVEL_EMOJI


def level_channel(level: int) -> str:
    try:
        return LEVEL_CHANNEL[LogLevel(level)]
    except ValueError:
        return "info"
