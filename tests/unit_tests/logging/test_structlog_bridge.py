"""
structlog → recorder routing
"""

from __future__ import annotations

import logging

import pytest
import structlog

from logkit.logging import LogLevel, RedirectStdLibHandler, configure_logging, get_logger, set_recorder


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root.handlers = handlers
    root.setLevel(level)


class TestConfigureLogging:
    def test_event_and_bound_values_become_entry(self, make_recorder) -> None:
        recorder = make_recorder()
        configure_logging(recorder, intercept_stdlib=False)

        get_logger("checkout").bind(cart="c-1").info("order_placed", order_id=7)

        entry = recorder.get_logs()[-1]
        assert entry.message == "order_placed"
        assert entry.level == LogLevel.INFO
        assert entry.data == {"logger": "checkout", "cart": "c-1", "order_id": 7}

    def test_levels_are_mapped(self, make_recorder) -> None:
        recorder = make_recorder()
        configure_logging(recorder, intercept_stdlib=False)
        log = get_logger()

        log.debug("d")
        log.warning("w")
        log.error("e")
        log.critical("c")

        assert [e.level for e in recorder.get_logs()[-4:]] == [
            LogLevel.DEBUG,
            LogLevel.WARN,
            LogLevel.ERROR,
            LogLevel.FATAL,
        ]

    def test_exception_carries_stack(self, make_recorder) -> None:
        recorder = make_recorder()
        configure_logging(recorder, intercept_stdlib=False)

        try:
            raise KeyError("missing")
        except KeyError:
            get_logger("jobs").exception("job_failed")

        entry = recorder.get_logs()[-1]
        assert entry.level == LogLevel.ERROR
        assert "KeyError: 'missing'" in entry.stack
        assert entry.data == {"logger": "jobs"}

    def test_minimum_level_still_applies(self, make_recorder) -> None:
        recorder = make_recorder(min_log_level=LogLevel.WARN)
        configure_logging(recorder, intercept_stdlib=False)
        before = recorder.get_logs()

        get_logger().info("chatty")

        assert recorder.get_logs() == before

    def test_contextvars_are_merged(self, make_recorder) -> None:
        recorder = make_recorder()
        configure_logging(recorder, intercept_stdlib=False)
        structlog.contextvars.bind_contextvars(request_id="r-1")

        get_logger("api").info("handled")

        assert recorder.get_logs()[-1].data["request_id"] == "r-1"

    def test_defaults_to_process_recorder(self, make_recorder) -> None:
        recorder = make_recorder()
        set_recorder(recorder)
        configure_logging(intercept_stdlib=False)

        get_logger().info("global")

        assert recorder.get_logs()[-1].message == "global"

    def test_stdlib_interception_installed_once(self, make_recorder) -> None:
        recorder = make_recorder()
        configure_logging(recorder)
        configure_logging(recorder)

        redirects = [h for h in logging.getLogger().handlers if isinstance(h, RedirectStdLibHandler)]
        assert len(redirects) == 1

        logging.getLogger("app.module").info("from stdlib")
        assert recorder.get_logs()[-1].message == "from stdlib"
