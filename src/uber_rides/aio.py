"""
Asyncio front end built on httpx.

Same operations, validation and error mapping as the blocking client and
auth functions; each call suspends the calling task while in flight.
"""

import logging
from typing import Iterable, Optional, Union

import httpx

from .auth import (
    FORM_HEADERS,
    code_grant_form,
    credentials_from_response,
    refresh_grant_form,
    require_code_exchange_config,
    resolve_app_credentials,
)
from .client import MAX_SEAT_COUNT, BaseClient, parse_response
from .config import UberConfig
from .errors import TransportError
from .models import Prices, Products, Times, User, UserActivity
from .types import ApiResponse, Credentials, Scope, TokenType

logger = logging.getLogger(__name__)


async def _post(
    url: str, data: dict, http_client: Optional[httpx.AsyncClient], timeout
) -> httpx.Response:
    logger.debug("POST %s grant_type=%s", url, data.get("grant_type"))
    try:
        if http_client is not None:
            return await http_client.post(
                url, data=data, headers={**FORM_HEADERS}, timeout=timeout
            )
        async with httpx.AsyncClient() as client:
            return await client.post(
                url, data=data, headers={**FORM_HEADERS}, timeout=timeout
            )
    except httpx.RequestError as exc:
        logger.warning("Token request to %s failed: %s", url, exc)
        raise TransportError(f"Network error calling token endpoint: {exc}") from exc


def _timeout(config: UberConfig):
    # httpx applies its own default when handed USE_CLIENT_DEFAULT.
    return config.timeout if config.timeout is not None else httpx.USE_CLIENT_DEFAULT


async def exchange_code(
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    redirect_uri: Optional[str] = None,
    code: Optional[str] = None,
    scopes: Optional[Iterable[Union[Scope, str]]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
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

    resp = await _post(config.token_url, form, http_client, _timeout(config))
    credentials = credentials_from_response(resp)
    logger.info("Exchanged authorization code for user credentials")
    return credentials


async def refresh_tokens(
    client_id: Optional[str],
    client_secret: Optional[str],
    credentials: Credentials,
    redirect_uri: Optional[str] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    config: Optional[UberConfig] = None,
) -> Credentials:
    """Obtain fresh credentials with the stored refresh token."""
    config = config or UberConfig()
    client_id, client_secret, redirect_uri = resolve_app_credentials(
        config, client_id, client_secret, redirect_uri
    )
    form = refresh_grant_form(client_id, client_secret, credentials, redirect_uri)

    resp = await _post(config.token_url, form, http_client, _timeout(config))
    refreshed = credentials_from_response(resp, previous=credentials)
    logger.info("Refreshed user credentials")
    return refreshed


class AsyncUberClient(BaseClient):
    """Asyncio Uber API client.

    Concurrent calls on one instance are safe: each returns its own
    ApiResponse and the pooled httpx client is the only shared resource.
    """

    def __init__(
        self,
        token_type: TokenType,
        token: str,
        http_client: Optional[httpx.AsyncClient] = None,
        config: Optional[UberConfig] = None,
    ):
        super().__init__(token_type, token, config)
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "AsyncUberClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get(self, url: str, model) -> ApiResponse:
        logger.debug("GET %s", url)
        try:
            resp = await self._http.get(
                url, headers=self.headers, timeout=_timeout(self._config)
            )
        except httpx.RequestError as exc:
            logger.warning("GET %s failed: %s", url, exc)
            raise TransportError(f"Network error calling {url}: {exc}") from exc
        return parse_response(url, resp, model)

    async def get_products(
        self, latitude: float, longitude: float
    ) -> ApiResponse[Products]:
        """Products available at a location; coordinates must be finite numbers."""
        return await self._get(*self._products_call(latitude, longitude))

    async def get_price_estimate(
        self,
        start_latitude: float,
        start_longitude: float,
        end_latitude: float,
        end_longitude: float,
        seat_count: int = MAX_SEAT_COUNT,
    ) -> ApiResponse[Prices]:
        return await self._get(
            *self._price_estimate_call(
                start_latitude, start_longitude, end_latitude, end_longitude, seat_count
            )
        )

    async def get_time_estimate(
        self, start_latitude: float, start_longitude: float, product_id: str = ""
    ) -> ApiResponse[Times]:
        return await self._get(
            *self._time_estimate_call(start_latitude, start_longitude, product_id)
        )

    async def get_user_activity(
        self, offset: int = 0, limit: int = 5
    ) -> ApiResponse[UserActivity]:
        return await self._get(*self._user_activity_call(offset, limit))

    async def get_current_user(self) -> ApiResponse[User]:
        return await self._get(*self._current_user_call())
