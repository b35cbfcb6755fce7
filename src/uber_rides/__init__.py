"""
uber_rides: client for the Uber ride API: OAuth code exchange, products,
price/time estimates, trip history and rider profile.
"""

from .auth import TokenManager, exchange_code, refresh_tokens
from .client import UberClient
from .config import UberConfig, get_config
from .errors import (
    ApiError,
    AuthenticationError,
    DeserializationError,
    InvalidArgument,
    RateLimitError,
    TransportError,
    UberError,
    UnsupportedOperation,
)
from .types import (
    ApiResponse,
    Credentials,
    ResponseMetadata,
    Scope,
    TokenState,
    TokenType,
)
from .urls import build_authorize_url, build_url

__all__ = [
    "ApiError",
    "ApiResponse",
    "AuthenticationError",
    "Credentials",
    "DeserializationError",
    "InvalidArgument",
    "RateLimitError",
    "ResponseMetadata",
    "Scope",
    "TokenManager",
    "TokenState",
    "TokenType",
    "TransportError",
    "UberClient",
    "UberConfig",
    "UberError",
    "UnsupportedOperation",
    "build_authorize_url",
    "build_url",
    "exchange_code",
    "get_config",
    "refresh_tokens",
]
__version__ = "0.1.0"
