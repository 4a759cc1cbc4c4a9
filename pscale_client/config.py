"""
Configuration for the PlanetScale client.

Values are loaded from a .env file at the project root and can be overridden
by actual environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_API_BASE_URL = "https://api.planetscale.com/v1"


class Settings(BaseSettings):
    """Settings for the PlanetScale API client."""

    SERVICE_NAME: str = "pscale-client"

    # Credentials
    PLANETSCALE_API_TOKEN: str = ""
    PLANETSCALE_ORGANIZATION: str = ""
    PLANETSCALE_API_BASE_URL: str = DEFAULT_API_BASE_URL

    # HTTP transport
    HTTP_TIMEOUT: float = 30.0
    HTTP_MAX_CONNECTIONS: int = 100
    HTTP_MAX_KEEPALIVE: int = 20

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore",
    )


# Global settings instance
settings = Settings()  # type: ignore
