"""
Exceptions raised by the Uber client.

Everything derives from UberError so callers can catch the whole family.
"""

from typing import Optional


class UberError(Exception):
    """Base exception for Uber client errors."""


class InvalidArgument(UberError, ValueError):
    """Malformed or out-of-range caller input, raised before any request."""


class UnsupportedOperation(UberError):
    """A user-scoped endpoint was called with a server token."""


class AuthenticationError(UberError):
    """The OAuth token endpoint rejected the request."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ApiError(UberError):
    """A resource endpoint answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: str = "", metadata=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.metadata = metadata


class RateLimitError(ApiError):
    """HTTP 429. ``retry_after`` is seconds until the limit resets, if known."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        metadata=None,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, status_code, body, metadata)
        self.retry_after = retry_after


class DeserializationError(UberError):
    """Response body is not JSON or does not match the expected shape."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class TransportError(UberError):
    """The request never produced an HTTP response (DNS, connect, timeout)."""
