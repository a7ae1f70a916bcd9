"""
LogLevel ordering, coercion and presentation attributes
"""

from __future__ import annotations

import logging

import pytest

from logkit.logging.levels import LogLevel, level_channel, level_emoji, level_name


class TestLogLevel:
    def test_total_order(self) -> None:
        assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARN < LogLevel.ERROR < LogLevel.FATAL
        assert [int(level) for level in LogLevel] == [0, 1, 2, 3, 4]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (LogLevel.ERROR, LogLevel.ERROR),
            (2, LogLevel.WARN),
            ("info", LogLevel.INFO),
            (" Fatal ", LogLevel.FATAL),
            ("warning", LogLevel.WARN),
            ("critical", LogLevel.FATAL),
            ("exception", LogLevel.ERROR),
            ("3", LogLevel.ERROR),
        ],
    )
    def test_coerce(self, value, expected) -> None:
        assert LogLevel.coerce(value) is expected

    @pytest.mark.parametrize("value", ["verbose", -1, 5, 7, logging.INFO, "10", None, True, 1.5])
    def test_coerce_rejects_unknown(self, value) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            LogLevel.coerce(value)

    @pytest.mark.parametrize(
        ("levelno", "expected"),
        [
            (logging.NOTSET, LogLevel.DEBUG),
            (logging.DEBUG, LogLevel.DEBUG),
            (logging.INFO, LogLevel.INFO),
            (logging.WARNING, LogLevel.WARN),
            (logging.ERROR, LogLevel.ERROR),
            (logging.CRITICAL, LogLevel.FATAL),
            (35, LogLevel.WARN),
        ],
    )
    def test_from_stdlib(self, levelno, expected) -> None:
        assert LogLevel.from_stdlib(levelno) is expected


class TestPresentation:
    @pytest.mark.parametrize(
        ("level", "name", "emoji", "channel"),
        [
            (LogLevel.DEBUG, "DEBUG", "🐛", "debug"),
            (LogLevel.INFO, "INFO", "ℹ️", "info"),
            (LogLevel.WARN, "WARN", "⚠️", "warn"),
            (LogLevel.ERROR, "ERROR", "❌", "error"),
            (LogLevel.FATAL, "FATAL", "💀", "error"),
        ],
    )
    def test_known_levels(self, level, name, emoji, channel) -> None:
        assert level_name(level) == name
        assert level_emoji(level) == emoji
        assert level_channel(level) == channel

    def test_unknown_level(self) -> None:
        assert level_name(9) == "UNKNOWN"
        assert level_emoji(9) == "📝"
        assert level_channel(9) == "info"
