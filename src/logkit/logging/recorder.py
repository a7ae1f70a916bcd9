"""
In-process log recorder: bounded buffer, level filtering and sink fan-out.
"""

from __future__ import annotations

import os
import random
import string
import sys
import threading
import time
import traceback
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from logkit.config import Settings, settings
from logkit.exceptions import LoggedError

from .levels import LogLevel, level_name
from .models import LogEntry, LoggerConfig, LogStats, orjson_dumps
from .sinks import BaseSink, ConsoleSink, FileSink, RemoteSink

Clock = Callable[[], datetime]
TokenSource = Callable[[], str]
ConfigInput = Union[LoggerConfig, Mapping[str, Any], None]

_BASE36 = string.digits + string.ascii_lowercase
_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


# =============================================================================
# Collaborator defaults
# =============================================================================


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def random_token(length: int = 9) -> str:
    """Base36 token for session ids. Not suitable for anything security related."""
    return "".join(random.choices(_BASE36, k=length))


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. `2024-05-01T12:30:45.123Z`."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def generate_session_id(clock: Clock = utc_now, token_source: TokenSource = random_token) -> str:
    millis = round(clock().timestamp() * 1000)
    return f"{millis}-{token_source()}"


def coerce_error(error: Any) -> BaseException:
    if isinstance(error, BaseException):
        return error
    return LoggedError(error)


def format_error_stack(error: BaseException) -> str:
    """
    Textual stack for an error.

    A raised exception yields its traceback. One that was never raised has no
    traceback, so its summary line is followed by the current call stack with
    logkit's own frames removed.
    """
    if error.__traceback__ is not None:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip()
    frames = [frame for frame in traceback.extract_stack() if not frame.filename.startswith(_PACKAGE_DIR)]
    summary = "".join(traceback.format_exception_only(type(error), error))
    return (summary + "".join(traceback.StackSummary.from_list(frames).format())).rstrip()


def default_config(environment_debug: Optional[bool] = None) -> LoggerConfig:
    """Defaults for a new recorder: DEBUG minimum in development, INFO otherwise."""
    if environment_debug is None:
        environment_debug = settings.environment.is_development
    return LoggerConfig(min_log_level=LogLevel.DEBUG if environment_debug else LogLevel.INFO)


def _status_level(status: Any) -> LogLevel:
    try:
        failed = int(status) >= 400
    except (TypeError, ValueError, OverflowError):
        failed = False
    return LogLevel.ERROR if failed else LogLevel.INFO


# =============================================================================
# Recorder
# =============================================================================


class LogRecorder:
    """
    Process-wide structured log recorder.

    Every public operation is total: internal failures are contained and
    reported on the console error channel, never raised to the caller.

    Args:
        config: Partial configuration (LoggerConfig or mapping) merged over the defaults
        sinks: Sinks to fan out to (default: console, remote, reserved file sink)
        clock: Wall clock returning aware datetimes
        platform: Host platform identifier (default: sys.platform)
        app_version: Build version stamped on entries (default: from settings)
        token_source: Random token for the session id
        **overrides: Individual config fields, applied after `config`
    """

    def __init__(
        self,
        config: ConfigInput = None,
        *,
        sinks: Optional[Sequence[BaseSink]] = None,
        clock: Optional[Clock] = None,
        platform: Optional[str] = None,
        app_version: Optional[str] = None,
        token_source: Optional[TokenSource] = None,
        **overrides: Any,
    ):
        self._lock = threading.RLock()
        self._clock = clock or utc_now
        self._platform = platform or sys.platform
        self._app_version = app_version or settings.app_version
        self._buffer: List[LogEntry] = []
        self._timers: Dict[str, float] = {}

        if sinks is None:
            console = ConsoleSink()
            remote = RemoteSink(timeout=settings.logging.remote_timeout, on_error=console.report_error)
            sinks = [console, remote, FileSink()]
        self._sinks: List[BaseSink] = list(sinks)
        self._console: Optional[ConsoleSink] = next((s for s in self._sinks if isinstance(s, ConsoleSink)), None)

        rejected: Optional[Exception] = None
        base = default_config()
        try:
            self._config = base.merged(config, **overrides)
        except (TypeError, ValueError) as exc:
            self._config = base
            rejected = exc

        self._session_id = generate_session_id(self._clock, token_source or random_token)

        self.info("Logger initialized", {"config": self._config.to_dict()})
        if rejected is not None:
            self.warn("Logger configuration rejected", {"error": str(rejected)})

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def app_version(self) -> str:
        return self._app_version

    @property
    def config(self) -> LoggerConfig:
        """A copy of the current configuration."""
        with self._lock:
            return self._config.model_copy()

    @property
    def sinks(self) -> List[BaseSink]:
        return list(self._sinks)

    # -------------------------------------------------------------------------
    # Core
    # -------------------------------------------------------------------------

    def record(self, level: Any, message: str, data: Any = None, error: Any = None) -> None:
        """Record one entry at `level`. Entries below the minimum level cost one comparison."""
        with self._contained():
            self._record(LogLevel.coerce(level), message, data, error)

    @contextmanager
    def _contained(self) -> Iterator[None]:
        try:
            yield
        except Exception as exc:
            self._report(f"Failed to record log entry: {exc!r}")

    def _record(self, level: LogLevel, message: str, data: Any, error: Any) -> None:
        with self._lock:
            config = self._config
            if level < config.min_log_level:
                return

            entry = self._create_entry(level, message, data, error, config)
            self._buffer.append(entry)
            if len(self._buffer) > config.max_log_entries:
                del self._buffer[: len(self._buffer) - config.max_log_entries]

            self._dispatch(entry, config)

    def _create_entry(self, level: LogLevel, message: str, data: Any, error: Any, config: LoggerConfig) -> LogEntry:
        stack = None
        if error is not None and level >= LogLevel.ERROR:
            stack = format_error_stack(coerce_error(error))
        return LogEntry(
            timestamp=format_timestamp(self._clock()),
            level=level,
            level_name=level_name(level),
            message=str(message),
            data=data,
            stack=stack,
            platform=self._platform,
            app_version=self._app_version,
            user_id=config.user_id,
            session_id=self._session_id,
        )

    def _dispatch(self, entry: LogEntry, config: LoggerConfig) -> None:
        for sink in self._sinks:
            if not sink.is_enabled(config):
                continue
            try:
                sink.emit(entry, config)
            except Exception as exc:
                self._report(f"Log sink {type(sink).__name__} failed: {exc!r}")

    def _report(self, text: str) -> None:
        """Console-only failure report. Never re-enters the recorder."""
        if self._console is not None:
            self._console.report_error(text)
            return
        try:
            sys.stderr.write(text + "\n")
        except Exception:
            pass  # No console left

    # -------------------------------------------------------------------------
    # Level conveniences
    # -------------------------------------------------------------------------

    def debug(self, message: str, data: Any = None) -> None:
        self.record(LogLevel.DEBUG, message, data)

    def info(self, message: str, data: Any = None) -> None:
        self.record(LogLevel.INFO, message, data)

    def warn(self, message: str, data: Any = None) -> None:
        self.record(LogLevel.WARN, message, data)

    warning = warn

    def error(self, message: str, error: Any = None, data: Any = None) -> None:
        """Record an ERROR entry. Non-exception `error` values are wrapped in LoggedError."""
        self.record(LogLevel.ERROR, message, data, error)

    def fatal(self, message: str, error: Any = None, data: Any = None) -> None:
        self.record(LogLevel.FATAL, message, data, error)

    critical = fatal

    # -------------------------------------------------------------------------
    # Domain-tagged conveniences
    # -------------------------------------------------------------------------

    def api_call(self, method: str, url: str, data: Any = None) -> None:
        with self._contained():
            self.info(f"API Call: {str(method).upper()} {url}", {"requestData": data})

    def api_response(self, method: str, url: str, status: int, data: Any = None) -> None:
        """ERROR for status >= 400, INFO otherwise (including a status that is not a number)."""
        with self._contained():
            self.record(
                _status_level(status),
                f"API Response: {str(method).upper()} {url} - {status}",
                {"status": status, "responseData": data},
            )

    def navigation(self, screen: str, params: Any = None) -> None:
        with self._contained():
            self.info(f"Navigation: {screen}", {"params": params})

    def user_action(self, action: str, data: Any = None) -> None:
        with self._contained():
            self.info(f"User Action: {action}", data)

    def auth(self, event: str, user_id: Optional[str] = None, data: Any = None) -> None:
        """Mapping `data` is merged next to `userId`; anything else is kept under `data`."""
        with self._contained():
            payload: Dict[str, Any] = {"userId": user_id}
            if isinstance(data, Mapping):
                payload.update(data)
            elif data is not None:
                payload["data"] = data
            self.info(f"Auth: {event}", payload)

    # -------------------------------------------------------------------------
    # Timers
    # -------------------------------------------------------------------------

    def time(self, label: str = "default") -> None:
        with self._contained():
            with self._lock:
                self._timers[label] = time.perf_counter()
            self.debug(f"Timer started: {label}")

    def time_end(self, label: str = "default") -> None:
        with self._contained():
            with self._lock:
                started = self._timers.pop(label, None)
            if started is None:
                self.debug(f"Timer ended: {label}")
                return
            elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
            self.debug(f"Timer ended: {label}", {"durationMs": elapsed_ms})

    @contextmanager
    def timer(self, label: str = "default") -> Iterator[None]:
        self.time(label)
        try:
            yield
        finally:
            self.time_end(label)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_logs(self) -> List[LogEntry]:
        with self._lock:
            return list(self._buffer)

    def get_logs_by_level(self, level: Any) -> List[LogEntry]:
        try:
            wanted = LogLevel.coerce(level)
        except ValueError:
            return []
        with self._lock:
            return [entry for entry in self._buffer if entry.level == wanted]

    def get_stats(self) -> LogStats:
        with self._lock:
            snapshot = list(self._buffer)

        logs_by_level: Dict[str, int] = {}
        for entry in snapshot:
            logs_by_level[entry.level_name] = logs_by_level.get(entry.level_name, 0) + 1

        return LogStats(
            total_logs=len(snapshot),
            session_id=self._session_id,
            logs_by_level=logs_by_level,
            oldest_log=snapshot[0].timestamp if snapshot else None,
            newest_log=snapshot[-1].timestamp if snapshot else None,
        )

    def export_logs(self) -> str:
        """The buffer as a 2-space indented JSON array, or `[]` if it cannot be serialized."""
        with self._lock:
            payload = [entry.to_dict() for entry in self._buffer]
        try:
            return orjson_dumps(payload, indent=True)
        except Exception as exc:
            self._report(f"Failed to export logs: {exc!r}")
            return "[]"

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def clear_logs(self) -> None:
        with self._lock:
            self._buffer.clear()
        self.info("Log buffer cleared")

    def update_config(self, partial: Optional[Mapping[str, Any]] = None, **overrides: Any) -> None:
        """Merge fields over the current configuration. Invalid updates leave it unchanged."""
        try:
            with self._lock:
                self._config = self._config.merged(partial, **overrides)
                snapshot = self._config.to_dict()
        except (TypeError, ValueError) as exc:
            self.warn("Logger configuration update rejected", {"error": str(exc)})
            return
        self.info("Logger configuration updated", {"config": snapshot})

    def set_user_id(self, user_id: Optional[str]) -> None:
        value = None if user_id is None else str(user_id)
        with self._lock:
            self._config = self._config.merged(user_id=value)
        self.info("User ID set for logging", {"userId": value})

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def flush(self) -> None:
        """Wait for remote deliveries still in flight."""
        for sink in self._sinks:
            try:
                await sink.flush()
            except Exception as exc:
                self._report(f"Log sink {type(sink).__name__} flush failed: {exc!r}")

    def close(self) -> None:
        for sink in self._sinks:
            try:
                sink.close()
            except Exception as exc:
                self._report(f"Log sink {type(sink).__name__} close failed: {exc!r}")


# =============================================================================
# Process-wide instance
# =============================================================================


def create_recorder(source: Optional[Settings] = None) -> LogRecorder:
    """Build a recorder from settings (environment, app version, LK_LOG_* options)."""
    source = source or settings
    console = ConsoleSink()
    sinks: List[BaseSink] = [
        console,
        RemoteSink(timeout=source.logging.remote_timeout, on_error=console.report_error),
        FileSink(),
    ]
    return LogRecorder(LoggerConfig.from_settings(source), sinks=sinks, app_version=source.app_version)


# Module-level singleton cache
_recorder_instance: Optional[LogRecorder] = None
_instance_lock = threading.Lock()


def get_recorder() -> LogRecorder:
    """Return the process-wide recorder, building it from settings on first use."""
    global _recorder_instance

    if _recorder_instance is None:
        with _instance_lock:
            if _recorder_instance is None:
                _recorder_instance = create_recorder()
    return _recorder_instance


def set_recorder(recorder: LogRecorder) -> None:
    """Install an explicitly constructed recorder as the process-wide instance."""
    global _recorder_instance
    with _instance_lock:
        _recorder_instance = recorder


def reset_recorder() -> None:
    """Drop the process-wide recorder (for tests)."""
    global _recorder_instance
    with _instance_lock:
        previous, _recorder_instance = _recorder_instance, None
    if previous is not None:
        previous.close()
