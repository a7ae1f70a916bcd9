"""
LogEntry / LoggerConfig / LogStats model tests
"""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from logkit.logging.levels import LogLevel
from logkit.logging.models import LogEntry, LoggerConfig, LogStats


def make_entry(**overrides) -> LogEntry:
    fields = dict(
        timestamp="2024-05-01T12:30:45.123Z",
        level=LogLevel.INFO,
        level_name="INFO",
        message="hello",
        platform="linux",
        app_version="1.0.0",
        session_id="1714566645123-abc123xyz",
    )
    fields.update(overrides)
    return LogEntry(**fields)


class TestLogEntry:
    def test_to_dict_omits_absent_optionals(self) -> None:
        assert make_entry().to_dict() == {
            "timestamp": "2024-05-01T12:30:45.123Z",
            "level": 1,
            "levelName": "INFO",
            "message": "hello",
            "platform": "linux",
            "appVersion": "1.0.0",
            "sessionId": "1714566645123-abc123xyz",
        }

    def test_to_dict_includes_present_optionals(self) -> None:
        payload = make_entry(data={"a": [1, 2]}, stack="Traceback", user_id="u-1").to_dict()

        assert payload["data"] == {"a": [1, 2]}
        assert payload["stack"] == "Traceback"
        assert payload["userId"] == "u-1"

    def test_to_json(self) -> None:
        entry = make_entry(data={"k": "v"})
        assert json.loads(entry.to_json()) == entry.to_dict()


class TestLoggerConfig:
    def test_defaults(self) -> None:
        config = LoggerConfig()

        assert config.enable_console is True
        assert config.enable_remote is False
        assert config.enable_file_logging is False
        assert config.max_log_entries == 1000
        assert config.remote_endpoint is None
        assert config.user_id is None

    def test_accepts_camel_case_names(self) -> None:
        config = LoggerConfig.model_validate({"enableConsole": False, "minLogLevel": "warn", "maxLogEntries": 3})

        assert config.enable_console is False
        assert config.min_log_level is LogLevel.WARN
        assert config.max_log_entries == 3

    def test_merged_mixes_naming_styles(self) -> None:
        base = LoggerConfig(max_log_entries=10)
        merged = base.merged({"remoteEndpoint": "https://logs.example.com"}, enable_remote=True)

        assert merged.remote_endpoint == "https://logs.example.com"
        assert merged.enable_remote is True
        assert merged.max_log_entries == 10
        assert base.enable_remote is False

    def test_merged_later_names_win(self) -> None:
        merged = LoggerConfig().merged({"maxLogEntries": 5}, max_log_entries=6)
        assert merged.max_log_entries == 6

    @pytest.mark.parametrize("update", [{"max_log_entries": 0}, {"min_log_level": "LOUD"}])
    def test_merged_rejects_invalid(self, update) -> None:
        with pytest.raises(ValidationError):
            LoggerConfig().merged(update)

    def test_to_dict_uses_wire_names(self) -> None:
        payload = LoggerConfig(min_log_level=LogLevel.INFO, user_id="u").to_dict()

        assert payload == {
            "enableConsole": True,
            "enableRemote": False,
            "enableFileLogging": False,
            "minLogLevel": 1,
            "maxLogEntries": 1000,
            "remoteEndpoint": None,
            "userId": "u",
        }


class TestLogStats:
    def test_to_dict(self) -> None:
        stats = LogStats(
            total_logs=2,
            session_id="s",
            logs_by_level={"INFO": 2},
            oldest_log="2024-05-01T12:30:45.123Z",
            newest_log="2024-05-01T12:30:45.124Z",
        )
        assert stats.to_dict() == {
            "totalLogs": 2,
            "logsByLevel": {"INFO": 2},
            "sessionId": "s",
            "oldestLog": "2024-05-01T12:30:45.123Z",
            "newestLog": "2024-05-01T12:30:45.124Z",
        }

    def test_empty_buffer_omits_bounds(self) -> None:
        assert LogStats(total_logs=0, session_id="s").to_dict() == {
            "totalLogs": 0,
            "logsByLevel": {},
            "sessionId": "s",
        }
