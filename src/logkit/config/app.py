"""
Application Configuration.
"""

from importlib import metadata
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DISTRIBUTION_NAME = "logkit"
FALLBACK_VERSION = "0.0.0"


class AppSettings(BaseSettings):
    """Basic application metadata."""

    model_config = SettingsConfigDict(
        env_prefix="LK_APP_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name: str = "logkit"
    version: Optional[str] = Field(
        default=None,
        description="Build version stamped on every entry; falls back to the installed distribution version",
    )

    def resolve_version(self) -> str:
        if self.version:
            return self.version
        try:
            return metadata.version(DISTRIBUTION_NAME)
        except metadata.PackageNotFoundError:
            return FALLBACK_VERSION
