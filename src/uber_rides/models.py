"""
Records returned by the ride endpoints.

Each record is a frozen dataclass built from the decoded JSON body via
``from_dict``. Unknown keys are ignored; a missing required key or a value
of the wrong type raises DeserializationError.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import DeserializationError

_MISSING = object()


def _field(data: dict, key: str, kind, default=_MISSING):
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        if default is _MISSING:
            raise DeserializationError(f"Missing required field {key!r}")
        return default

    # JSON numbers: ints are acceptable where floats are expected, bools never are.
    if kind is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, bool) and kind is not bool:
        raise DeserializationError(f"Field {key!r} should be {kind.__name__}, got bool")
    if not isinstance(value, kind):
        raise DeserializationError(
            f"Field {key!r} should be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _object(data: object, what: str) -> dict:
    if not isinstance(data, dict):
        raise DeserializationError(f"Expected a JSON object for {what}")
    return data


def _list(data: dict, key: str, parse) -> tuple:
    items = _field(data, key, list, default=[])
    return tuple(parse(item) for item in items)


# ── Products ──────────────────────────────────────────────


@dataclass(frozen=True)
class Product:
    product_id: str
    display_name: str
    description: str = ""
    capacity: Optional[int] = None
    image: Optional[str] = None
    shared: bool = False
    upfront_fare_enabled: bool = False
    cash_enabled: bool = False
    product_group: Optional[str] = None

    @classmethod
    def from_dict(cls, data: object) -> "Product":
        data = _object(data, "product")
        return cls(
            product_id=_field(data, "product_id", str),
            display_name=_field(data, "display_name", str),
            description=_field(data, "description", str, ""),
            capacity=_field(data, "capacity", int, None),
            image=_field(data, "image", str, None),
            shared=_field(data, "shared", bool, False),
            upfront_fare_enabled=_field(data, "upfront_fare_enabled", bool, False),
            cash_enabled=_field(data, "cash_enabled", bool, False),
            product_group=_field(data, "product_group", str, None),
        )


@dataclass(frozen=True)
class Products:
    products: tuple[Product, ...] = ()

    @classmethod
    def from_dict(cls, data: object) -> "Products":
        data = _object(data, "products")
        return cls(products=_list(data, "products", Product.from_dict))


# ── Estimates ─────────────────────────────────────────────


@dataclass(frozen=True)
class Price:
    """Price estimate for one product. ``estimate`` is the display text."""

    product_id: str
    display_name: str
    estimate: str
    currency_code: Optional[str] = None
    low_estimate: Optional[int] = None
    high_estimate: Optional[int] = None
    surge_multiplier: float = 1.0
    duration: Optional[int] = None
    distance: Optional[float] = None

    @classmethod
    def from_dict(cls, data: object) -> "Price":
        data = _object(data, "price")
        return cls(
            product_id=_field(data, "product_id", str),
            display_name=_field(data, "display_name", str),
            estimate=_field(data, "estimate", str),
            currency_code=_field(data, "currency_code", str, None),
            low_estimate=_field(data, "low_estimate", int, None),
            high_estimate=_field(data, "high_estimate", int, None),
            surge_multiplier=_field(data, "surge_multiplier", float, 1.0),
            duration=_field(data, "duration", int, None),
            distance=_field(data, "distance", float, None),
        )


@dataclass(frozen=True)
class Prices:
    prices: tuple[Price, ...] = ()

    @classmethod
    def from_dict(cls, data: object) -> "Prices":
        data = _object(data, "prices")
        return cls(prices=_list(data, "prices", Price.from_dict))


@dataclass(frozen=True)
class Time:
    """Pickup ETA for one product.

    Mirrors the times endpoint: ``estimate`` is an integer number of
    seconds. Low/high fare estimates and the surge multiplier come from the
    price endpoint and live on ``Price``.
    """

    product_id: str
    display_name: str
    estimate: int

    @classmethod
    def from_dict(cls, data: object) -> "Time":
        data = _object(data, "time")
        return cls(
            product_id=_field(data, "product_id", str),
            display_name=_field(data, "display_name", str),
            estimate=_field(data, "estimate", int),
        )


@dataclass(frozen=True)
class Times:
    times: tuple[Time, ...] = ()

    @classmethod
    def from_dict(cls, data: object) -> "Times":
        data = _object(data, "times")
        return cls(times=_list(data, "times", Time.from_dict))


# ── History ───────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    display_name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_dict(cls, data: object) -> "Location":
        data = _object(data, "location")
        return cls(
            display_name=_field(data, "display_name", str),
            latitude=_field(data, "latitude", float, None),
            longitude=_field(data, "longitude", float, None),
        )


@dataclass(frozen=True)
class Trip:
    uuid: str
    request_time: int
    product_id: str
    status: str
    distance: float
    start_time: int
    end_time: int
    start_city: Optional[Location] = None

    @classmethod
    def from_dict(cls, data: object) -> "Trip":
        data = _object(data, "trip")
        city = data.get("start_city")
        return cls(
            uuid=_field(data, "uuid", str),
            request_time=_field(data, "request_time", int),
            product_id=_field(data, "product_id", str),
            status=_field(data, "status", str),
            distance=_field(data, "distance", float),
            start_time=_field(data, "start_time", int),
            end_time=_field(data, "end_time", int),
            start_city=Location.from_dict(city) if city is not None else None,
        )


@dataclass(frozen=True)
class UserActivity:
    offset: int
    limit: int
    count: int
    history: tuple[Trip, ...] = ()

    @classmethod
    def from_dict(cls, data: object) -> "UserActivity":
        data = _object(data, "user activity")
        return cls(
            offset=_field(data, "offset", int),
            limit=_field(data, "limit", int),
            count=_field(data, "count", int),
            history=_list(data, "history", Trip.from_dict),
        )


# ── Profile ───────────────────────────────────────────────


@dataclass(frozen=True)
class User:
    uuid: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    picture: Optional[str] = None
    promo_code: Optional[str] = None
    mobile_verified: bool = False
    rider_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: object) -> "User":
        data = _object(data, "user")
        return cls(
            uuid=_field(data, "uuid", str),
            first_name=_field(data, "first_name", str, ""),
            last_name=_field(data, "last_name", str, ""),
            email=_field(data, "email", str, ""),
            picture=_field(data, "picture", str, None),
            promo_code=_field(data, "promo_code", str, None),
            mobile_verified=_field(data, "mobile_verified", bool, False),
            rider_id=_field(data, "rider_id", str, None),
        )
