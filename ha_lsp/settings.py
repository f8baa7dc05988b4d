"""ha-lsp settings, read from environment variables and an optional .env file.

Inside the Home Assistant add-on the Supervisor injects ``SUPERVISOR_TOKEN``;
outside it a long-lived access token can be supplied as ``HA_TOKEN``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,  # Allow both field name and alias
    )

    # Environment
    environment: Literal["development", "production", "testing"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Home Assistant
    ha_api_url: str = Field(
        default="http://supervisor/core/api",
        description="Base URL of the Home Assistant REST API",
        validation_alias=AliasChoices("ha_api_url", "supervisor_api"),
    )
    ha_token: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer token for the HA API (empty = live features disabled)",
        validation_alias=AliasChoices("ha_token", "supervisor_token", "hass_token"),
    )
    request_timeout: int = Field(default=30, ge=1, le=300, description="HTTP timeout in seconds")

    # Language server
    cache_ttl_seconds: float = Field(
        default=60.0,
        gt=0,
        description="How long live HA data is served from cache before a refresh",
    )
    diagnostics_debounce_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Quiescence window after the last edit before re-validating",
    )
    shared_secrets_path: str = Field(
        default="/homeassistant/secrets.yaml",
        description="Last-resort secrets.yaml location for !secret navigation",
    )

    @property
    def has_token(self) -> bool:
        """Whether a live-data credential is configured."""
        return bool(self.ha_token.get_secret_value())


@lru_cache
def get_settings() -> Settings:
    """Settings for this process, read from the environment once."""
    return Settings()
