"""
logkit settings.

Three groups, each with its own prefix:

    LK_ENV        build mode (environment.py)
    LK_APP_*      app name and version stamped on entries (app.py)
    LK_LOG_*      initial recorder configuration (logging.py)

The app and logging groups read `.env`, `.env.local`, `.env.{LK_ENV}` and
`.env.{LK_ENV}.local`, later files winning.

Usage:
    from logkit.config import settings

    settings.log_min_level  # "DEBUG" in development
    settings.logging.max_entries  # 1000
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .environment import EnvironmentSettings
from .logging import LoggingSettings


class Settings(BaseSettings):
    """Root settings; sub-settings are built lazily on first access."""

    model_config = SettingsConfigDict(extra="ignore")

    @cached_property
    def environment(self) -> EnvironmentSettings:
        return EnvironmentSettings()

    @cached_property
    def app(self) -> AppSettings:
        return AppSettings(_env_file=self.environment.env_files)

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings(_env_file=self.environment.env_files)

    @property
    def app_version(self) -> str:
        return self.app.resolve_version()

    @property
    def log_min_level(self) -> str:
        if self.logging.min_level:
            return self.logging.min_level
        return "DEBUG" if self.environment.is_development else "INFO"


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "AppSettings",
    "EnvironmentSettings",
    "LoggingSettings",
]
