"""Device client configuration management.

All configuration is loaded from environment variables (or a local .env file).
No hardcoded values except the production endpoint and sensible defaults.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Production API endpoint
DEFAULT_API_URL = "https://api.foxglove.dev"

# Default request timeout (in seconds)
DEFAULT_TIMEOUT = 30.0


class Settings(BaseSettings):
    """Device client settings loaded from environment variables.

    Use FOXGLOVE_ prefix for all settings, e.g. FOXGLOVE_DEVICE_TOKEN.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    foxglove_log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level",
    )
    foxglove_log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    # Platform API
    foxglove_api_url: str = Field(
        default=DEFAULT_API_URL,
        description="Platform API base URL",
    )
    foxglove_device_token: str | None = Field(
        default=None,
        description="Device token used to authenticate this device",
        repr=False,
    )
    foxglove_user_agent: str | None = Field(
        default=None,
        description="User-Agent override (defaults to foxglove-sdk/<version>)",
    )
    foxglove_request_timeout_sec: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        le=300,
        description="HTTP request timeout in seconds",
    )

    @field_validator("foxglove_device_token", "foxglove_user_agent")
    @classmethod
    def _empty_as_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def has_device_token(self) -> bool:
        """Check if a device token is configured."""
        return self.foxglove_device_token is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings.

    Settings are loaded once and cached for the lifetime of the process.
    """
    return Settings()
