"""
Build mode selection.

`LK_ENV` picks the mode a new recorder starts in: development records
everything from DEBUG up, every other mode starts at INFO. The mode also
selects which `.env` files the other settings groups read.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BuildMode = Literal["development", "testing", "staging", "production"]


class EnvironmentSettings(BaseSettings):
    """Read from the process environment and the base `.env` only."""

    model_config = SettingsConfigDict(
        env_prefix="LK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: BuildMode = Field(default="development", description="Build mode of the host application")

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def env_files(self) -> tuple[str, ...]:
        """`.env` files for the other settings groups, in load order (last one wins)."""
        return (".env", ".env.local", f".env.{self.env}", f".env.{self.env}.local")
