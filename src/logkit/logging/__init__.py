"""
Structured in-process logging for logkit.

Provides a bounded entry buffer with level filtering and multi-sink fan-out:
- console: per-severity channels with emoji headers
- remote: fire-and-forget JSON POST per entry
- file: reserved, accepted and discarded

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog facade + orjson serialization + httpx delivery.
"""

from .core import configure_logging, get_logger
from .interceptors import RedirectStdLibHandler
from .levels import LogLevel
from .models import LogEntry, LoggerConfig, LogStats
from .recorder import LogRecorder, create_recorder, get_recorder, reset_recorder, set_recorder
from .sinks import BaseSink, ConsoleSink, FileSink, RemoteSink

__all__ = [
    "BaseSink",
    "ConsoleSink",
    "FileSink",
    "LogEntry",
    "LogLevel",
    "LogRecorder",
    "LogStats",
    "LoggerConfig",
    "RedirectStdLibHandler",
    "RemoteSink",
    "configure_logging",
    "create_recorder",
    "get_logger",
    "get_recorder",
    "reset_recorder",
    "set_recorder",
]
