"""
Credentials consumed by every API call.

Credentials carry the API token, the organization the caller works in and the
API base URL. The runtime reads them once per call and never caches or
mutates them; a zero-argument provider can be supplied instead of a fixed
value to support rotation.
"""

from __future__ import annotations

from typing import Callable, Union

from pydantic import BaseModel, field_validator

from pscale_client.config import DEFAULT_API_BASE_URL, Settings, settings
from pscale_client.runtime.errors import ConfigError
from pscale_client.runtime.sensitive import SensitiveStr, unwrap


class Credentials(BaseModel):
    """Token, organization and base URL for the PlanetScale API.

    Attributes:
        token: API token, sent verbatim in the Authorization header.
        organization: Default organization name for callers.
        base_url: API base URL without trailing slash.
    """

    token: SensitiveStr
    organization: str
    base_url: str = DEFAULT_API_BASE_URL

    model_config = {"frozen": True}

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "Credentials":
        """Build credentials from settings/environment.

        Raises:
            ConfigError: If the token or organization is missing.
        """
        config = config or settings
        if not config.PLANETSCALE_API_TOKEN:
            raise ConfigError("PLANETSCALE_API_TOKEN environment variable is required")
        if not config.PLANETSCALE_ORGANIZATION:
            raise ConfigError("PLANETSCALE_ORGANIZATION environment variable is required")
        if not config.PLANETSCALE_API_BASE_URL:
            raise ConfigError("PLANETSCALE_API_BASE_URL must not be empty")

        return cls(
            token=config.PLANETSCALE_API_TOKEN,
            organization=config.PLANETSCALE_ORGANIZATION,
            base_url=config.PLANETSCALE_API_BASE_URL,
        )

    def with_organization(self, organization: str) -> "Credentials":
        """Return new credentials targeting another organization."""
        return self.model_copy(update={"organization": organization})

    def get_headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            "Authorization": unwrap(self.token),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }


CredentialsSource = Union[Credentials, Callable[[], Credentials]]


def resolve_credentials(source: CredentialsSource) -> Credentials:
    """Return the credentials for one call.

    Raises:
        ConfigError: If the provider returns something unusable.
    """
    credentials = source() if callable(source) else source
    if not isinstance(credentials, Credentials):
        raise ConfigError(f"Credentials provider returned {type(credentials).__name__}")
    if not unwrap(credentials.token):
        raise ConfigError("API token is empty")
    return credentials
