"""
Uber OAuth2
Authorization-code exchange, token refresh and a small token manager.

The form building and response handling here are shared with the async
variants in ``uber_rides.aio``.
"""

import logging
import threading
from typing import Iterable, Optional, Union

import requests

from .client import UberClient
from .config import UberConfig, get_config
from .errors import (
    AuthenticationError,
    DeserializationError,
    InvalidArgument,
    TransportError,
)
from .types import (
    DEFAULT_HEADERS,
    DEFAULT_LEEWAY_SEC,
    Credentials,
    Scope,
    TokenState,
    TokenType,
    format_scopes,
)
from .urls import is_absolute_uri, require_text

logger = logging.getLogger(__name__)

FORM_HEADERS = {**DEFAULT_HEADERS, "Content-Type": "application/x-www-form-urlencoded"}


def code_grant_form(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    code: str,
    scopes: Optional[Iterable[Union[Scope, str]]] = None,
) -> dict[str, str]:
    """Validate inputs and build the authorization_code form body."""
    require_text(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uri,
        code=code,
    )
    if not is_absolute_uri(redirect_uri):
        raise InvalidArgument(f"Invalid redirect_uri: {redirect_uri!r}")

    return {
        "client_id": client_id,
        "client_secret": client_secret,
        "grant_type": "authorization_code",
        "redirect_uri": redirect_uri,
        "code": code,
        "scope": format_scopes(scopes),
    }


def refresh_grant_form(
    client_id: str,
    client_secret: str,
    credentials: Credentials,
    redirect_uri: Optional[str] = None,
) -> dict[str, str]:
    """Validate inputs and build the refresh_token form body."""
    require_text(client_id=client_id, client_secret=client_secret)
    if not credentials.refresh_token:
        raise InvalidArgument("Credentials carry no refresh token")

    form = {
        "client_id": client_id,
        "client_secret": client_secret,
        "grant_type": "refresh_token",
        "refresh_token": credentials.refresh_token,
    }
    if redirect_uri:
        if not is_absolute_uri(redirect_uri):
            raise InvalidArgument(f"Invalid redirect_uri: {redirect_uri!r}")
        form["redirect_uri"] = redirect_uri
    return form


def credentials_from_response(
    resp, previous: Optional[Credentials] = None
) -> Credentials:
    """Turn a token endpoint response into Credentials or raise.

    Works with both ``requests`` and ``httpx`` responses. When refreshing,
    ``previous`` supplies the refresh token if the server omits a new one.
    """
    if not 200 <= resp.status_code < 300:
        logger.warning("Token endpoint returned %s", resp.status_code)
        raise AuthenticationError(
            f"Error authenticating: {resp.status_code}\n{resp.text}",
            status_code=resp.status_code,
            body=resp.text,
        )

    try:
        payload = resp.json()
    except ValueError as exc:
        raise DeserializationError(
            f"Token response is not valid JSON: {exc}", body=resp.text
        ) from exc

    credentials = Credentials.from_token_response(payload)
    if previous is not None and not credentials.refresh_token:
        credentials = Credentials(
            access_token=credentials.access_token,
            refresh_token=previous.refresh_token,
            expires_at=credentials.expires_at,
            scopes=credentials.scopes or previous.scopes,
            token_type=credentials.token_type,
        )
    return credentials


def resolve_app_credentials(
    config: UberConfig,
    client_id: Optional[str],
    client_secret: Optional[str],
    redirect_uri: Optional[str],
) -> tuple[Optional[str], Optional[str], Optional[str]]:
    """Fill in app credentials the caller omitted from ``config``.

    Only ``None`` falls back; an explicit empty string is kept so the form
    validation rejects it.
    """
    return (
        config.client_id if client_id is None else client_id,
        config.client_secret if client_secret is None else client_secret,
        config.redirect_uri if redirect_uri is None else redirect_uri,
    )


def require_code_exchange_config(
    config: UberConfig,
    client_id: Optional[str],
    client_secret: Optional[str],
    redirect_uri: Optional[str],
) -> None:
    omitted = client_id is None and client_secret is None and redirect_uri is None
    if omitted and not config.can_exchange_codes():
        raise InvalidArgument(
            "No app credentials given or configured "
            "(set UBER_CLIENT_ID, UBER_CLIENT_SECRET and UBER_REDIRECT_URI)"
        )


def _post(
    url: str, data: dict, session: Optional[requests.Session], timeout: Optional[float]
) -> requests.Response:
    sender = session if session is not None else requests
    logger.debug("POST %s grant_type=%s", url, data.get("grant_type"))
    try:
        return sender.post(url, data=data, headers={**FORM_HEADERS}, timeout=timeout)
    except requests.RequestException as exc:
        logger.warning("Token request to %s failed: %s", url, exc)
        raise TransportError(f"Network error calling token endpoint: {exc}") from exc


def exchange_code(
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    redirect_uri: Optional[str] = None,
    code: Optional[str] = None,
    scopes: Optional[Iterable[Union[Scope, str]]] = None,
    session: Optional[requests.Session] = None,
    config: Optional[UberConfig] = None,
) -> Credentials:
    """Exchange an authorization code for an access/refresh token pair.

    App credentials left as None are taken from ``config``.
    """
    config = config or UberConfig()
    require_code_exchange_config(config, client_id, client_secret, redirect_uri)
    client_id, client_secret, redirect_uri = resolve_app_credentials(
        config, client_id, client_secret, redirect_uri
    )
    form = code_grant_form(client_id, client_secret, redirect_uri, code, scopes)

    resp = _post(config.token_url, form, session, config.timeout)
    credentials = credentials_from_response(resp)
    logger.info("Exchanged authorization code for user credentials")
    return credentials


def refresh_tokens(
    client_id: Optional[str],
    client_secret: Optional[str],
    credentials: Credentials,
    redirect_uri: Optional[str] = None,
    session: Optional[requests.Session] = None,
    config: Optional[UberConfig] = None,
) -> Credentials:
    """Obtain fresh credentials with the stored refresh token.

    ``client_id``/``client_secret`` given as None come from ``config``.
    """
    config = config or UberConfig()
    client_id, client_secret, redirect_uri = resolve_app_credentials(
        config, client_id, client_secret, redirect_uri
    )
    form = refresh_grant_form(client_id, client_secret, credentials, redirect_uri)

    resp = _post(config.token_url, form, session, config.timeout)
    refreshed = credentials_from_response(resp, previous=credentials)
    logger.info("Refreshed user credentials")
    return refreshed


class TokenManager:
    """Keeps user credentials valid, refreshing them once they expire.

    Clients bind their Authorization header at construction, so rotating
    the token means building a new client through ``client()``.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        credentials: Credentials,
        session: Optional[requests.Session] = None,
        config: Optional[UberConfig] = None,
        leeway: float = DEFAULT_LEEWAY_SEC,
    ):
        require_text(client_id=client_id, client_secret=client_secret)
        self._client_id = client_id
        self._client_secret = client_secret
        self._credentials = credentials
        self._session = session
        self._config = config or UberConfig()
        self._leeway = leeway
        self._lock = threading.Lock()
        self._refreshing = False

    @classmethod
    def from_config(
        cls,
        credentials: Credentials,
        config: Optional[UberConfig] = None,
        session: Optional[requests.Session] = None,
        leeway: float = DEFAULT_LEEWAY_SEC,
    ) -> "TokenManager":
        """Manage ``credentials`` with the app credentials in ``config``."""
        config = config or get_config()
        if not config.can_refresh_tokens():
            raise InvalidArgument(
                "No app credentials configured (set UBER_CLIENT_ID and UBER_CLIENT_SECRET)"
            )
        return cls(
            config.client_id,
            config.client_secret,
            credentials,
            session=session,
            config=config,
            leeway=leeway,
        )

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def state(self) -> TokenState:
        if self._refreshing:
            return TokenState.REFRESHING
        return self._credentials.state(leeway=self._leeway)

    def refresh(self) -> Credentials:
        with self._lock:
            return self._refresh_locked()

    def get_credentials(self) -> Credentials:
        """Return valid credentials, refreshing first if they have expired."""
        if self._credentials.state(leeway=self._leeway) is TokenState.VALID:
            return self._credentials

        with self._lock:
            # Another thread may have refreshed while we waited.
            if self._credentials.state(leeway=self._leeway) is TokenState.VALID:
                return self._credentials
            return self._refresh_locked()

    def client(self, session: Optional[requests.Session] = None) -> UberClient:
        """Build a user-token client bound to the current access token."""
        credentials = self.get_credentials()
        return UberClient(
            TokenType.USER,
            credentials.access_token,
            session=session or self._session,
            config=self._config,
        )

    def _refresh_locked(self) -> Credentials:
        self._refreshing = True
        try:
            self._credentials = refresh_tokens(
                self._client_id,
                self._client_secret,
                self._credentials,
                redirect_uri=self._config.redirect_uri,
                session=self._session,
                config=self._config,
            )
        finally:
            self._refreshing = False
        return self._credentials
