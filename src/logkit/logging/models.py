"""
Recorder data model: entries, configuration and statistics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .levels import LogLevel

if TYPE_CHECKING:
    from logkit.config import Settings


def orjson_dumps(v: Any, *, indent: bool = False) -> str:
    """JSON serialization using orjson; values orjson cannot encode are rendered with str()."""
    option = orjson.OPT_NON_STR_KEYS | orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC
    if indent:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(v, default=str, option=option).decode()


# =============================================================================
# Entries
# =============================================================================


@dataclass(frozen=True)
class LogEntry:
    """One recorded event. `data` is kept by reference, never copied."""

    timestamp: str
    level: LogLevel
    level_name: str
    message: str
    platform: str
    app_version: str
    session_id: str
    data: Any = None
    stack: Optional[str] = None
    user_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (camelCase keys, absent optionals omitted)."""
        payload: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "level": int(self.level),
            "levelName": self.level_name,
            "message": self.message,
        }
        if self.data is not None:
            payload["data"] = self.data
        if self.stack is not None:
            payload["stack"] = self.stack
        payload["platform"] = self.platform
        payload["appVersion"] = self.app_version
        if self.user_id is not None:
            payload["userId"] = self.user_id
        payload["sessionId"] = self.session_id
        return payload

    def to_json(self) -> str:
        return orjson_dumps(self.to_dict())


# =============================================================================
# Configuration
# =============================================================================


class LoggerConfig(BaseModel):
    """Process-wide recorder options. Accepts both snake_case and camelCase names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    enable_console: bool = True
    enable_remote: bool = False
    enable_file_logging: bool = False
    min_log_level: LogLevel = LogLevel.DEBUG
    max_log_entries: int = Field(default=1000, ge=1)
    remote_endpoint: Optional[str] = None
    user_id: Optional[str] = None

    @field_validator("min_log_level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> LogLevel:
        return LogLevel.coerce(value)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LoggerConfig":
        """Initial configuration for the process-wide recorder."""
        log = settings.logging
        return cls(
            enable_console=log.enable_console,
            enable_remote=log.enable_remote,
            enable_file_logging=log.enable_file_logging,
            min_log_level=settings.log_min_level,
            max_log_entries=log.max_entries,
            remote_endpoint=log.remote_endpoint,
            user_id=log.user_id,
        )

    def merged(self, partial: Optional[Mapping[str, Any]] = None, **overrides: Any) -> "LoggerConfig":
        """
        Return a new config with the given fields laid over this one.

        Raises:
            pydantic.ValidationError: a merged value is invalid
        """
        if isinstance(partial, BaseModel):
            partial = partial.model_dump(exclude_unset=True)
        update = {_FIELD_BY_ALIAS.get(key, key): value for key, value in {**(partial or {}), **overrides}.items()}
        return LoggerConfig.model_validate({**self.model_dump(), **update})

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


_FIELD_BY_ALIAS = {to_camel(name): name for name in LoggerConfig.model_fields}


# =============================================================================
# Statistics
# =============================================================================


@dataclass(frozen=True)
class LogStats:
    total_logs: int
    session_id: str
    logs_by_level: Dict[str, int] = field(default_factory=dict)
    oldest_log: Optional[str] = None
    newest_log: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "totalLogs": self.total_logs,
            "logsByLevel": dict(self.logs_by_level),
            "sessionId": self.session_id,
        }
        if self.oldest_log is not None:
            payload["oldestLog"] = self.oldest_log
        if self.newest_log is not None:
            payload["newestLog"] = self.newest_log
        return payload
