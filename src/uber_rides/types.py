"""
Shared types for the Uber client: constants, token credentials, scopes
and per-response metadata.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterable, Mapping, Optional, TypeVar, Union

from .errors import DeserializationError, InvalidArgument

API_BASE = "https://api.uber.com"
API_VERSION = "v1.2"

AUTH_BASE = "https://login.uber.com"
AUTH_VERSION = "v2"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "uber-rides-python",
}

# Seconds before the real expiry at which a token is treated as expired.
DEFAULT_LEEWAY_SEC = 60


class TokenType(Enum):
    """Selects the Authorization scheme a client sends."""

    SERVER = "Token"
    USER = "Bearer"

    def header(self, token: str) -> str:
        return f"{self.value} {token}"


class TokenState(Enum):
    VALID = "valid"
    EXPIRED = "expired"
    REFRESHING = "refreshing"


class Scope(Enum):
    """OAuth scopes understood by the token and authorize endpoints."""

    PROFILE = "profile"
    HISTORY = "history"
    HISTORY_LITE = "history_lite"
    PLACES = "places"
    REQUEST = "request"
    REQUEST_RECEIPT = "request_receipt"
    ALL_TRIPS = "all_trips"
    OFFLINE_ACCESS = "offline_access"


def format_scopes(scopes: Optional[Iterable[Union[Scope, str]]]) -> str:
    """Validate scopes and join them with spaces, in enum order."""
    if not scopes:
        return ""
    if isinstance(scopes, str):
        # Same space-joined form the token endpoint returns.
        scopes = scopes.split()
    elif isinstance(scopes, Scope):
        scopes = [scopes]

    wanted = set()
    for scope in scopes:
        if isinstance(scope, Scope):
            wanted.add(scope)
            continue
        try:
            wanted.add(Scope(scope))
        except ValueError:
            raise InvalidArgument(f"Unknown scope: {scope!r}") from None

    return " ".join(s.value for s in Scope if s in wanted)


@dataclass(frozen=True)
class Credentials:
    """Access/refresh token pair from the OAuth token endpoint.

    Equality only looks at the two tokens; expiry and scopes are
    bookkeeping about the same grant.
    """

    access_token: str
    refresh_token: str
    expires_at: Optional[float] = field(default=None, compare=False)
    scopes: frozenset = field(default=frozenset(), compare=False)
    token_type: str = field(default="Bearer", compare=False)

    @classmethod
    def from_token_response(
        cls, payload: object, now: Optional[float] = None
    ) -> "Credentials":
        if not isinstance(payload, dict):
            raise DeserializationError("Token response is not a JSON object", body=str(payload))

        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise DeserializationError(
                "Token response is missing access_token", body=str(payload)
            )
        for key in ("refresh_token", "scope", "token_type"):
            value = payload.get(key)
            if value is not None and not isinstance(value, str):
                raise DeserializationError(
                    f"Token response field {key!r} should be str, got {type(value).__name__}",
                    body=str(payload),
                )

        expires_at = None
        expires_in = payload.get("expires_in")
        if expires_in is not None:
            try:
                expires_at = (time.time() if now is None else now) + float(expires_in)
            except (TypeError, ValueError):
                raise DeserializationError(
                    f"Invalid expires_in: {expires_in!r}", body=str(payload)
                ) from None

        return cls(
            access_token=access_token,
            refresh_token=payload.get("refresh_token") or "",
            expires_at=expires_at,
            scopes=frozenset((payload.get("scope") or "").split()),
            token_type=payload.get("token_type") or "Bearer",
        )

    def state(
        self, now: Optional[float] = None, leeway: float = DEFAULT_LEEWAY_SEC
    ) -> TokenState:
        if self.expires_at is None:
            return TokenState.VALID
        now = time.time() if now is None else now
        if now + leeway >= self.expires_at:
            return TokenState.EXPIRED
        return TokenState.VALID

    def to_dict(self) -> dict[str, object]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "scope": " ".join(sorted(self.scopes)),
            "token_type": self.token_type,
        }


@dataclass(frozen=True)
class ResponseMetadata:
    """Rate-limit and caching headers of a single response."""

    rate_limit_remaining: Optional[str] = None
    rate_limit_limit: Optional[str] = None
    rate_limit_reset: Optional[str] = None
    etag: Optional[str] = None
    uber_app: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "ResponseMetadata":
        # Both requests and httpx header mappings are case-insensitive.
        return cls(
            rate_limit_remaining=headers.get("X-Rate-Limit-Remaining"),
            rate_limit_limit=headers.get("X-Rate-Limit-Limit"),
            rate_limit_reset=headers.get("X-Rate-Limit-Reset"),
            etag=headers.get("Etag"),
            uber_app=headers.get("X-Uber-App"),
        )

    def seconds_until_reset(self, now: Optional[float] = None) -> Optional[float]:
        """Seconds until X-Rate-Limit-Reset (an epoch timestamp), or None."""
        if self.rate_limit_reset is None:
            return None
        try:
            reset = float(self.rate_limit_reset)
        except ValueError:
            return None
        now = time.time() if now is None else now
        return max(0.0, reset - now)


T = TypeVar("T")


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Parsed payload of one call together with that call's metadata."""

    data: T
    metadata: ResponseMetadata
