from logkit.exceptions import LoggedError, LogkitError
from logkit.logging import (
    LogEntry,
    LoggerConfig,
    LogLevel,
    LogRecorder,
    LogStats,
    configure_logging,
    get_logger,
    get_recorder,
    reset_recorder,
)


def __getattr__(name: str):
    if name == "logger":
        return get_recorder()
    raise AttributeError(f"module 'logkit' has no attribute {name}")


__all__ = [
    "LogEntry",
    "LoggedError",
    "LoggerConfig",
    "LogLevel",
    "LogRecorder",
    "LogStats",
    "LogkitError",
    "configure_logging",
    "get_logger",
    "get_recorder",
    "logger",
    "reset_recorder",
]
