from __future__ import annotations

from functools import lru_cache
from typing import Any

from loguru import logger
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from artifactory_client.urls import DEFAULT_CONTEXT_ROOT, DEFAULT_PORT

log = logger.bind(module="config")


class Settings(BaseSettings):
    """Connection settings for building a client from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    artifactory_url: str | None = Field(default=None, alias="ARTIFACTORY_URL")
    artifactory_port: int = Field(default=DEFAULT_PORT, alias="ARTIFACTORY_PORT")
    artifactory_context_root: str = Field(default=DEFAULT_CONTEXT_ROOT, alias="ARTIFACTORY_CONTEXT_ROOT")
    artifactory_repository: str = Field(default="", alias="ARTIFACTORY_REPOSITORY")
    artifactory_username: str | None = Field(default=None, alias="ARTIFACTORY_USERNAME")
    artifactory_password: str | None = Field(default=None, alias="ARTIFACTORY_PASSWORD")
    artifactory_timeout_seconds: float = Field(default=30.0, alias="ARTIFACTORY_TIMEOUT_SECONDS")

    @computed_field(return_type=bool)
    @property
    def has_credentials(self) -> bool:
        return bool(self.artifactory_username and self.artifactory_password)

    def basic_auth(self) -> tuple[str, str] | None:
        """Return the (username, password) pair when both are configured."""
        if not self.has_credentials:
            return None
        return (str(self.artifactory_username), str(self.artifactory_password))

    def export_safe(self) -> dict[str, Any]:
        """Return non-sensitive settings for debugging/logging."""
        return {
            "artifactory_url": self.artifactory_url,
            "artifactory_port": self.artifactory_port,
            "artifactory_context_root": self.artifactory_context_root,
            "artifactory_repository": self.artifactory_repository,
            "artifactory_username": self.artifactory_username,
            "artifactory_timeout_seconds": self.artifactory_timeout_seconds,
            "has_credentials": self.has_credentials,
        }


@lru_cache
def get_settings() -> Settings:
    """Load and cache settings."""
    settings = Settings()
    log.info("Settings initialised: {}", settings.export_safe())
    return settings
