"""
structlog wiring: host code logs through structlog, entries land in the recorder.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from .interceptors import RedirectStdLibHandler
from .levels import LogLevel
from .recorder import LogRecorder, get_recorder

# Keys structlog adds that are not part of the entry payload
_RESERVED_KEYS = {"event", "level", "exc_info", "stack_info", "timestamp", "_record", "_from_structlog"}


def get_logger(name: Optional[str] = None, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(_name=name or "root", **initial_values)


# =============================================================================
# Structlog Processors
# =============================================================================


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Move the bound `_name` to the `logger` key."""
    event_dict["logger"] = event_dict.pop("_name", "root")
    return event_dict


class RecorderRenderer:
    """Final processor: hand the event to the recorder and drop it from structlog's output."""

    def __init__(self, recorder: Optional[LogRecorder] = None):
        self._recorder = recorder

    @property
    def recorder(self) -> LogRecorder:
        return self._recorder or get_recorder()

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        level = _level_for(event_dict.get("level", method_name))
        message = str(event_dict.get("event", ""))
        error = _error_from(event_dict.get("exc_info"))
        data = {key: value for key, value in event_dict.items() if key not in _RESERVED_KEYS}

        self.recorder.record(level, message, data or None, error)
        raise structlog.DropEvent


def _level_for(name: Any) -> LogLevel:
    try:
        return LogLevel.coerce(name)
    except ValueError:
        return LogLevel.INFO


def _error_from(exc_info: Any) -> Optional[BaseException]:
    if not exc_info:
        return None
    if isinstance(exc_info, BaseException):
        return exc_info
    if isinstance(exc_info, tuple):
        return exc_info[1]
    # exc_info=True: the exception currently being handled
    return sys.exc_info()[1]


# =============================================================================
# Configuration Logic
# =============================================================================


def configure_logging(
    recorder: Optional[LogRecorder] = None,
    *,
    intercept_stdlib: bool = True,
    stdlib_level: int = logging.DEBUG,
) -> None:
    """
    Route structlog (and optionally stdlib logging) into the recorder.

    Args:
        recorder: Target recorder (default: the process-wide instance, resolved per event)
        intercept_stdlib: Install one RedirectStdLibHandler on the root logger
        stdlib_level: Root logger level; the recorder still applies its own minimum
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            add_logger_name,
            structlog.processors.StackInfoRenderer(),
            RecorderRenderer(recorder),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    if intercept_stdlib:
        root_logger = logging.getLogger()
        root_logger.handlers = [h for h in root_logger.handlers if not isinstance(h, RedirectStdLibHandler)]
        root_logger.setLevel(stdlib_level)
        root_logger.addHandler(RedirectStdLibHandler(recorder))
