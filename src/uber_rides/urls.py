"""
URL helpers: versioned endpoint URLs, query strings and the OAuth
authorize link.
"""

import math
import urllib.parse
from typing import Iterable, Optional, Union

from .errors import InvalidArgument
from .types import AUTH_BASE, AUTH_VERSION, Scope, format_scopes


def build_url(base: str, version: str, resource: str) -> str:
    """Compose ``{base}/{version}/{resource}``.

    ``resource`` may carry a query string, which must already be encoded.
    """
    for name, value in (("base", base), ("version", version), ("resource", resource)):
        if not value:
            raise InvalidArgument(f"{name} must not be empty")
    return f"{base.rstrip('/')}/{version.strip('/')}/{resource.lstrip('/')}"


def with_query(path: str, params: dict) -> str:
    """Append url-encoded ``params`` to ``path``, skipping None values."""
    query = urllib.parse.urlencode({k: v for k, v in params.items() if v is not None})
    return f"{path}?{query}" if query else path


def is_absolute_uri(value: str) -> bool:
    if not value or any(ch.isspace() for ch in value):
        return False
    parsed = urllib.parse.urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


def format_coordinate(value: float, name: str = "coordinate") -> str:
    """Format a coordinate so it parses back to the identical float."""
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidArgument(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidArgument(f"{name} must be finite")
    return repr(number)


def require_text(**values: str) -> None:
    """Raise InvalidArgument for the first empty or non-string value."""
    for name, value in values.items():
        if not isinstance(value, str) or not value:
            raise InvalidArgument(f"{name} must be a non-empty string")


def build_authorize_url(
    client_id: str,
    redirect_uri: str,
    scopes: Optional[Iterable[Union[Scope, str]]] = None,
    state: Optional[str] = None,
    auth_base: str = AUTH_BASE,
) -> str:
    """Build the login page URL that starts the authorization-code grant."""
    require_text(client_id=client_id, redirect_uri=redirect_uri)
    if not is_absolute_uri(redirect_uri):
        raise InvalidArgument(f"Invalid redirect_uri: {redirect_uri!r}")

    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": format_scopes(scopes) or None,
        "state": state or None,
    }
    return build_url(
        auth_base, "oauth", with_query(f"{AUTH_VERSION}/authorize", params)
    )
