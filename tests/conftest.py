import io
import typing as t
from datetime import datetime, timedelta, timezone

import pytest

from logkit.logging import ConsoleSink, FileSink, LogRecorder, reset_recorder

SESSION_TOKEN = "abc123xyz"
START = datetime(2024, 5, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic wall clock advancing one millisecond per reading."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(milliseconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


@pytest.fixture
def channels() -> dict[str, io.StringIO]:
    return {name: io.StringIO() for name in ("debug", "info", "warn", "error")}


@pytest.fixture
def console(channels) -> ConsoleSink:
    return ConsoleSink(channels, use_color=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_recorder(console, clock) -> t.Callable[..., LogRecorder]:
    """
    Factory for recorders wired to in-memory console channels and a fake clock.
    Extra sinks are appended after the console and the reserved file sink.
    """
    created: list[LogRecorder] = []

    def factory(config=None, *, extra_sinks=(), **overrides) -> LogRecorder:
        recorder = LogRecorder(
            config,
            sinks=[console, FileSink(), *extra_sinks],
            clock=clock,
            platform="test-os",
            app_version="1.2.3",
            token_source=lambda: SESSION_TOKEN,
            **overrides,
        )
        created.append(recorder)
        return recorder

    yield factory

    for recorder in created:
        recorder.close()


@pytest.fixture(autouse=True)
def isolate_process_recorder():
    """Each test starts without a process-wide recorder."""
    reset_recorder()
    yield
    reset_recorder()
