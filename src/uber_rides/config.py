"""
Client configuration.

Defaults target the production API. ``UberConfig.from_env`` reads
``UBER_*`` environment variables for applications that prefer that to
passing values in code.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from .errors import InvalidArgument
from .types import API_BASE, API_VERSION, AUTH_BASE, AUTH_VERSION
from .urls import build_url


@dataclass(frozen=True)
class UberConfig:
    """Endpoints, transport timeout and optional app credentials."""

    api_base: str = API_BASE
    api_version: str = API_VERSION
    auth_base: str = AUTH_BASE
    # None leaves the transport default in place.
    timeout: Optional[float] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None
    server_token: Optional[str] = None

    @property
    def token_url(self) -> str:
        return build_url(self.auth_base, "oauth", f"{AUTH_VERSION}/token")

    @classmethod
    def from_env(cls) -> "UberConfig":
        """Load configuration from environment variables."""
        timeout = os.getenv("UBER_TIMEOUT")
        try:
            parsed_timeout = float(timeout) if timeout else None
        except ValueError:
            raise InvalidArgument(f"UBER_TIMEOUT must be a number, got {timeout!r}") from None

        return cls(
            api_base=os.getenv("UBER_API_BASE", API_BASE),
            api_version=os.getenv("UBER_API_VERSION", API_VERSION),
            auth_base=os.getenv("UBER_AUTH_BASE", AUTH_BASE),
            timeout=parsed_timeout,
            client_id=os.getenv("UBER_CLIENT_ID"),
            client_secret=os.getenv("UBER_CLIENT_SECRET"),
            redirect_uri=os.getenv("UBER_REDIRECT_URI"),
            server_token=os.getenv("UBER_SERVER_TOKEN"),
        )

    def can_exchange_codes(self) -> bool:
        """Check whether app credentials for the token endpoint are present."""
        return bool(self.client_id and self.client_secret and self.redirect_uri)

    def can_refresh_tokens(self) -> bool:
        # Refresh grants do not need a redirect URI.
        return bool(self.client_id and self.client_secret)


@lru_cache()
def get_config() -> UberConfig:
    """Get the environment-derived configuration singleton."""
    return UberConfig.from_env()
