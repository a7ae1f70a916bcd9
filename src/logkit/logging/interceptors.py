"""
Interceptors for capturing standard library logs.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .levels import LogLevel
from .recorder import LogRecorder, get_recorder

# The remote sink's own transport logs; recording them would loop back into the sink
SKIPPED_LOGGER_PREFIXES = ("httpx", "httpcore", "asyncio", "structlog")


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging records into the recorder.

    The stdlib level is mapped onto LogLevel (WARNING→WARN, CRITICAL→FATAL),
    the logger name travels in the entry payload and `exc_info` becomes the
    entry's error.
    """

    def __init__(self, recorder: Optional[LogRecorder] = None, level: int = logging.NOTSET):
        super().__init__(level)
        self._recorder = recorder

    @property
    def recorder(self) -> LogRecorder:
        return self._recorder or get_recorder()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.name.startswith(SKIPPED_LOGGER_PREFIXES):
                return

            data: Dict[str, Any] = {"logger": self._simplify_logger_name(record.name)}
            error = record.exc_info[1] if record.exc_info else None

            self.recorder.record(LogLevel.from_stdlib(record.levelno), record.getMessage(), data, error)
        except Exception:
            self.handleError(record)

    @staticmethod
    def _simplify_logger_name(name: str) -> str:
        """
        Simplify a logger name for display.

        Rules:
        - "" -> "stdlib"
        - "payments" or "payments.api" -> unchanged
        - "app.services.payments.api" -> "payments.api"
        """
        if not name:
            return "stdlib"

        parts = name.split(".")
        if len(parts) <= 2:
            return name

        return ".".join(parts[-2:])
