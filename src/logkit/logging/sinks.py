"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional, TextIO

import httpx

from .formatters import ConsoleFormatter
from .levels import level_channel
from .models import LogEntry, LoggerConfig

CHANNELS = ("debug", "info", "warn", "error")
REMOTE_HEADERS = {"Content-Type": "application/json"}


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def is_enabled(self, config: LoggerConfig) -> bool:
        """Whether the current configuration routes entries to this sink."""
        ...

    @abstractmethod
    def emit(self, entry: LogEntry, config: LoggerConfig) -> None:
        """Emit a log entry to the sink."""
        ...

    async def flush(self) -> None:
        """Wait for deliveries still in flight."""

    def close(self) -> None:
        """Close the sink and release resources."""


class ConsoleSink(BaseSink):
    """Console sink with one output stream per severity channel.

    Args:
        channels: Mapping of channel name (debug, info, warn, error) to stream.
            Missing channels resolve at write time: debug/info to stdout, warn/error to stderr.
        use_color: Force ANSI colors on or off (default: on for TTY streams)
    """

    def __init__(self, channels: Optional[Mapping[str, TextIO]] = None, *, use_color: Optional[bool] = None):
        unknown = set(channels or {}) - set(CHANNELS)
        if unknown:
            raise ValueError(f"Unknown console channels: {sorted(unknown)}")
        self._channels = dict(channels or {})
        self._use_color = use_color

    def stream(self, channel: str) -> TextIO:
        stream = self._channels.get(channel)
        if stream is not None:
            return stream
        return sys.stderr if channel in {"warn", "error"} else sys.stdout

    def write(self, channel: str, text: str) -> None:
        stream = self.stream(channel)
        stream.write(text + "\n")
        stream.flush()

    def report_error(self, text: str) -> None:
        """Direct write to the error channel that never raises."""
        try:
            self.write("error", text)
        except Exception:
            pass  # Nowhere left to report to

    def _color_for(self, stream: Any) -> bool:
        if self._use_color is not None:
            return self._use_color
        return bool(getattr(stream, "isatty", lambda: False)())

    def is_enabled(self, config: LoggerConfig) -> bool:
        return config.enable_console

    def emit(self, entry: LogEntry, config: LoggerConfig) -> None:
        channel = level_channel(entry.level)
        line = ConsoleFormatter.format(entry, use_color=self._color_for(self.stream(channel)))
        self.write(channel, line)

        stack_line = ConsoleFormatter.format_stack(entry)
        if stack_line:
            self.write("error", stack_line)


class RemoteSink(BaseSink):
    """Fire-and-forget HTTP delivery of single entries.

    Each entry is POSTed as JSON on its own short-lived httpx client. With a
    running event loop the delivery becomes a task on that loop; otherwise it
    runs on a background loop thread started on first use. Failures are passed
    to `on_error` once and never raised.

    Args:
        timeout: Per-delivery timeout in seconds
        transport: Optional httpx transport (e.g. httpx.MockTransport)
        on_error: Callback receiving a one-line failure report (default: stderr)
    """

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        self._timeout = timeout
        self._transport = transport
        self._on_error = on_error
        self._tasks: set[asyncio.Task[None]] = set()
        self._futures: set[concurrent.futures.Future[None]] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def in_flight(self) -> int:
        return len(self._tasks) + len(self._futures)

    def is_enabled(self, config: LoggerConfig) -> bool:
        return config.enable_remote and bool(config.remote_endpoint)

    def emit(self, entry: LogEntry, config: LoggerConfig) -> None:
        # Serialize before detaching so encoding errors surface to the caller's dispatch loop
        body = entry.to_json()
        self.dispatch(str(config.remote_endpoint), body)

    def dispatch(self, endpoint: str, body: str) -> None:
        """Schedule one POST without waiting for it."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self._deliver(endpoint, body))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return

        future = asyncio.run_coroutine_threadsafe(self._deliver(endpoint, body), self._background_loop())
        self._futures.add(future)
        future.add_done_callback(self._futures.discard)

    async def _deliver(self, endpoint: str, body: str) -> None:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                await client.post(endpoint, content=body.encode("utf-8"), headers=REMOTE_HEADERS)
        except Exception as exc:
            self._report(f"Failed to send log to remote: {exc!r}")

    def _report(self, text: str) -> None:
        try:
            if self._on_error is not None:
                self._on_error(text)
            else:
                sys.stderr.write(text + "\n")
        except Exception:
            pass  # Reporting is best-effort

    def _background_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None or self._loop.is_closed():
                loop = asyncio.new_event_loop()
                thread = threading.Thread(target=loop.run_forever, name="logkit-remote", daemon=True)
                thread.start()
                self._loop, self._thread = loop, thread
            return self._loop

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until background-thread deliveries finish (or timeout)."""
        pending = list(self._futures)
        if pending:
            done, _ = concurrent.futures.wait(pending, timeout=timeout)
            # Waiters wake before done-callbacks run
            self._futures.difference_update(done)

    async def flush(self) -> None:
        current = asyncio.get_running_loop()
        local = [task for task in list(self._tasks) if task.get_loop() is current]
        background = [asyncio.wrap_future(future) for future in list(self._futures)]
        if local or background:
            await asyncio.gather(*local, *background, return_exceptions=True)

    def close(self, timeout: Optional[float] = 5.0) -> None:
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop, self._thread = None, None
        if loop is None:
            return
        self.wait(timeout)
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout)
        if not loop.is_running():
            loop.close()


class FileSink(BaseSink):
    """Reserved sink behind `enable_file_logging`. Entries are accepted and discarded."""

    def is_enabled(self, config: LoggerConfig) -> bool:
        return config.enable_file_logging

    def emit(self, entry: LogEntry, config: LoggerConfig) -> None:
        return None
