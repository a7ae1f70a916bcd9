"""
Logging Configuration.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Initial recorder configuration, read once when the singleton is built."""

    model_config = SettingsConfigDict(
        env_prefix="LK_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    enable_console: bool = Field(default=True, description="Write entries to the console sink")
    enable_remote: bool = Field(default=False, description="POST entries to remote_endpoint")
    enable_file_logging: bool = Field(default=False, description="Reserved, the file sink is a no-op")
    min_level: Optional[str] = Field(
        default=None,
        description="Minimum level name (DEBUG, INFO, WARN, ERROR, FATAL); derived from the environment if unset",
    )
    max_entries: int = Field(default=1000, ge=1, description="In-memory buffer capacity")
    remote_endpoint: Optional[str] = Field(default=None, description="Destination URL for the remote sink")
    remote_timeout: float = Field(default=10.0, gt=0, description="Timeout in seconds for one remote delivery")
    user_id: Optional[str] = Field(default=None, description="User id attached to entries from startup")
