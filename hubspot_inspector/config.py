"""Runtime configuration for the inspector.

The access token is read once at startup (CLI option or environment) and
validated before any client is built; nothing downstream reads the
environment directly.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BASE_URL = "https://api.hubapi.com"
DEFAULT_TIMEOUT = 30

TOKEN_ENV = "HUBSPOT_ACCESS_TOKEN"
BASE_URL_ENV = "HUBSPOT_BASE_URL"
TIMEOUT_ENV = "HUBSPOT_TIMEOUT"


class ConfigError(Exception):
    """Configuration is missing or invalid.

    Attributes:
        hint: Optional one-line remediation shown under the error.
    """

    def __init__(self, message: str, hint: str = ""):
        super().__init__(message)
        self.hint = hint


@dataclass(frozen=True)
class InspectorConfig:
    """Connection settings for the HubSpot API."""

    access_token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "InspectorConfig":
        """Build a config from ``HUBSPOT_*`` environment variables."""
        env = os.environ if env is None else env
        raw_timeout = env.get(TIMEOUT_ENV)
        try:
            timeout = int(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigError(f"{TIMEOUT_ENV} must be an integer, got {raw_timeout!r}")
        return cls(
            access_token=env.get(TOKEN_ENV) or None,
            base_url=env.get(BASE_URL_ENV) or DEFAULT_BASE_URL,
            timeout=timeout,
        )

    def validate(self) -> "InspectorConfig":
        """Raise ``ConfigError`` unless the config can be used to reach the API."""
        if not self.access_token:
            raise ConfigError(
                f"{TOKEN_ENV} environment variable is required",
                hint=f"Set it with: export {TOKEN_ENV}=your_token_here",
            )
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigError(f"Base URL must start with http:// or https://, got {self.base_url!r}")
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be a positive number of seconds, got {self.timeout}")
        return self
