"""
Uber API Client
Products, price and time estimates, trip history, rider profile.

``BaseClient`` holds everything that does not touch the network: header
setup, argument validation, URL building and response parsing. The
blocking ``UberClient`` below and ``uber_rides.aio.AsyncUberClient`` only
differ in how they send the GET.
"""

import logging
from typing import Optional

import requests

from .config import UberConfig, get_config
from .errors import (
    ApiError,
    DeserializationError,
    InvalidArgument,
    RateLimitError,
    TransportError,
    UnsupportedOperation,
)
from .models import Prices, Products, Times, User, UserActivity
from .types import DEFAULT_HEADERS, ApiResponse, ResponseMetadata, TokenType
from .urls import build_url, format_coordinate, require_text, with_query

logger = logging.getLogger(__name__)

MAX_SEAT_COUNT = 2
MAX_HISTORY_LIMIT = 50


def parse_response(url: str, resp, model) -> ApiResponse:
    """Map a ``requests`` or ``httpx`` response onto ``model`` or raise."""
    metadata = ResponseMetadata.from_headers(resp.headers)
    status = resp.status_code

    if not 200 <= status < 300:
        logger.warning("GET %s returned %s", url, status)
        message = f"Uber API error {status}: {resp.text}"
        if status == 429:
            raise RateLimitError(
                message,
                status,
                body=resp.text,
                metadata=metadata,
                retry_after=metadata.seconds_until_reset(),
            )
        raise ApiError(message, status, body=resp.text, metadata=metadata)

    try:
        payload = resp.json()
    except ValueError as exc:
        raise DeserializationError(
            f"Response from {url} is not valid JSON: {exc}", body=resp.text
        ) from exc

    try:
        data = model.from_dict(payload)
    except DeserializationError as exc:
        raise DeserializationError(
            f"Unexpected {model.__name__} payload from {url}: {exc}", body=resp.text
        ) from exc

    return ApiResponse(data=data, metadata=metadata)


class BaseClient:
    """Token, headers and request planning shared by both clients."""

    def __init__(
        self, token_type: TokenType, token: str, config: Optional[UberConfig] = None
    ):
        if not isinstance(token_type, TokenType):
            raise InvalidArgument(f"token_type must be a TokenType, got {token_type!r}")
        require_text(token=token)

        self._token_type = token_type
        self._config = config or UberConfig()
        self._headers = {
            **DEFAULT_HEADERS,
            "Authorization": token_type.header(token),
        }

    @classmethod
    def from_config(cls, config: Optional[UberConfig] = None, **kwargs):
        """Build a server-token client from ``config.server_token``.

        Falls back to ``get_config()`` (the ``UBER_*`` environment) when no
        config is given. Extra keyword arguments go to the constructor.
        """
        config = config or get_config()
        if not config.server_token:
            raise InvalidArgument("No server token configured (set UBER_SERVER_TOKEN)")
        return cls(TokenType.SERVER, config.server_token, config=config, **kwargs)

    @property
    def token_type(self) -> TokenType:
        return self._token_type

    @property
    def headers(self) -> dict:
        return dict(self._headers)

    def _url(self, resource: str) -> str:
        return build_url(self._config.api_base, self._config.api_version, resource)

    def _require_user_token(self, endpoint: str) -> None:
        if self._token_type is TokenType.SERVER:
            raise UnsupportedOperation(f"{endpoint} only supports user access tokens")

    # ── Request planning ──────────────────────────────────

    def _products_call(self, latitude: float, longitude: float):
        params = {
            "latitude": format_coordinate(latitude, "latitude"),
            "longitude": format_coordinate(longitude, "longitude"),
        }
        return self._url(with_query("products", params)), Products

    def _price_estimate_call(
        self,
        start_latitude: float,
        start_longitude: float,
        end_latitude: float,
        end_longitude: float,
        seat_count: int,
    ):
        if (
            isinstance(seat_count, bool)
            or not isinstance(seat_count, int)
            or not 0 <= seat_count <= MAX_SEAT_COUNT
        ):
            raise InvalidArgument(
                f"seat_count must be an integer between 0 and {MAX_SEAT_COUNT}"
            )

        params = {
            "start_latitude": format_coordinate(start_latitude, "start_latitude"),
            "start_longitude": format_coordinate(start_longitude, "start_longitude"),
            "end_latitude": format_coordinate(end_latitude, "end_latitude"),
            "end_longitude": format_coordinate(end_longitude, "end_longitude"),
            "seat_count": seat_count,
        }
        return self._url(with_query("estimates/price", params)), Prices

    def _time_estimate_call(
        self, start_latitude: float, start_longitude: float, product_id: str
    ):
        if product_id is not None and not isinstance(product_id, str):
            raise InvalidArgument("product_id must be a string")

        params = {
            "start_latitude": format_coordinate(start_latitude, "start_latitude"),
            "start_longitude": format_coordinate(start_longitude, "start_longitude"),
        }
        if product_id and product_id.strip():
            params["product_id"] = product_id.strip()
        return self._url(with_query("estimates/time", params)), Times

    def _user_activity_call(self, offset: int, limit: int):
        self._require_user_token("history")
        for name, value in (("offset", offset), ("limit", limit)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidArgument(f"{name} must be a non-negative integer")
        if limit > MAX_HISTORY_LIMIT:
            raise InvalidArgument(f"limit must not exceed {MAX_HISTORY_LIMIT}")

        params = {"offset": offset, "limit": limit}
        return self._url(with_query("history", params)), UserActivity

    def _current_user_call(self):
        self._require_user_token("me")
        return self._url("me"), User


class UberClient(BaseClient):
    """Blocking Uber API client.

    Every call returns an ApiResponse pairing the parsed record with the
    rate-limit headers of that response; the client itself keeps no
    per-call state and can be shared across threads.
    """

    def __init__(
        self,
        token_type: TokenType,
        token: str,
        session: Optional[requests.Session] = None,
        config: Optional[UberConfig] = None,
    ):
        super().__init__(token_type, token, config)
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "UberClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get(self, url: str, model) -> ApiResponse:
        logger.debug("GET %s", url)
        try:
            resp = self._session.get(
                url, headers=self.headers, timeout=self._config.timeout
            )
        except requests.RequestException as exc:
            logger.warning("GET %s failed: %s", url, exc)
            raise TransportError(f"Network error calling {url}: {exc}") from exc
        return parse_response(url, resp, model)

    # ── Products ──────────────────────────────────────────

    def get_products(self, latitude: float, longitude: float) -> ApiResponse[Products]:
        """Products available at a location.

        Coordinates must be finite numbers; NaN, infinities and values too
        large for a float raise InvalidArgument before any request is sent.
        """
        return self._get(*self._products_call(latitude, longitude))

    # ── Estimates ─────────────────────────────────────────

    def get_price_estimate(
        self,
        start_latitude: float,
        start_longitude: float,
        end_latitude: float,
        end_longitude: float,
        seat_count: int = MAX_SEAT_COUNT,
    ) -> ApiResponse[Prices]:
        return self._get(
            *self._price_estimate_call(
                start_latitude, start_longitude, end_latitude, end_longitude, seat_count
            )
        )

    def get_time_estimate(
        self, start_latitude: float, start_longitude: float, product_id: str = ""
    ) -> ApiResponse[Times]:
        return self._get(
            *self._time_estimate_call(start_latitude, start_longitude, product_id)
        )

    # ── User ──────────────────────────────────────────────

    def get_user_activity(self, offset: int = 0, limit: int = 5) -> ApiResponse[UserActivity]:
        return self._get(*self._user_activity_call(offset, limit))

    def get_current_user(self) -> ApiResponse[User]:
        return self._get(*self._current_user_call())
