"""
Shared fixtures for the uber_rides test suite.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from uber_rides.types import Credentials


# ── Token fixtures ───────────────────────────────────────────

@pytest.fixture
def access_token():
    return "KA.eyJ2ZXJzaW9uIjoyLCJpZCI6ImFjY2VzcyJ9.access"


@pytest.fixture
def refresh_token():
    return "MA.CAESEHJlZnJlc2gtdG9rZW4tdGVzdA.refresh"


@pytest.fixture
def server_token():
    return "server-token-0123456789abcdef"


@pytest.fixture
def credentials(access_token, refresh_token):
    return Credentials(access_token=access_token, refresh_token=refresh_token)


@pytest.fixture
def app_credentials():
    return {
        "client_id": "client-id-123",
        "client_secret": "client-secret-456",
        "redirect_uri": "https://example.com/oauth/callback",
    }


# ── Mock response factories ──────────────────────────────────

def make_response(status_code=200, body=None, headers=None, text=None):
    """Build a MagicMock shaped like requests.Response."""
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.headers = CaseInsensitiveDict(headers or {})
    if text is None:
        text = json.dumps(body) if body is not None else ""
    resp.text = text
    if body is not None:
        resp.json.return_value = body
    else:
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1")
    return resp


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def mock_session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def mock_token_response(access_token, refresh_token):
    """Response body of /oauth/v2/token."""
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "Bearer",
        "expires_in": 2592000,
        "scope": "profile history",
    }


@pytest.fixture
def rate_limit_headers():
    return {
        "X-Rate-Limit-Remaining": "42",
        "X-Rate-Limit-Limit": "2000",
        "X-Rate-Limit-Reset": "1700000000",
        "Etag": 'W/"abc123"',
        "X-Uber-App": "uberex-nonsandbox",
    }


@pytest.fixture
def mock_products_response():
    return {
        "products": [
            {
                "product_id": "a1111c8c-c720-46c3-8534-2fcdd730040d",
                "display_name": "UberX",
                "description": "THE LOW-COST UBER",
                "capacity": 4,
                "image": "http://d1a3f4spazzrp4.cloudfront.net/car.jpg",
                "shared": False,
                "upfront_fare_enabled": True,
                "cash_enabled": False,
                "product_group": "uberx",
            },
            {
                "product_id": "26546650-e557-4a7b-86e7-6a3942445247",
                "display_name": "POOL",
                "capacity": 2,
                "shared": True,
            },
        ]
    }


@pytest.fixture
def mock_prices_response():
    return {
        "prices": [
            {
                "product_id": "26546650-e557-4a7b-86e7-6a3942445247",
                "currency_code": "USD",
                "display_name": "POOL",
                "estimate": "$7",
                "low_estimate": 7,
                "high_estimate": 7,
                "surge_multiplier": 1,
                "duration": 640,
                "distance": 5.34,
            },
            {
                "product_id": "a1111c8c-c720-46c3-8534-2fcdd730040d",
                "currency_code": None,
                "display_name": "UberTAXI",
                "estimate": "Metered",
                "low_estimate": None,
                "high_estimate": None,
                "surge_multiplier": 1.5,
            },
        ]
    }


@pytest.fixture
def mock_times_response():
    return {
        "times": [
            {
                "product_id": "a1111c8c-c720-46c3-8534-2fcdd730040d",
                "display_name": "UberX",
                "estimate": 410,
            }
        ]
    }


@pytest.fixture
def mock_history_response():
    return {
        "offset": 0,
        "limit": 1,
        "count": 5,
        "history": [
            {
                "uuid": "7354db54-cc9b-4961-81f2-0094b8e2d215",
                "request_time": 1401884467,
                "product_id": "edf5e5eb-6ae6-44af-bec6-5bdcf1e3ed2c",
                "status": "completed",
                "distance": 0.0279562,
                "start_time": 1401884646,
                "end_time": 1401884732,
                "start_city": {
                    "latitude": 37.7749,
                    "display_name": "San Francisco",
                    "longitude": -122.4194,
                },
            }
        ],
    }


@pytest.fixture
def mock_user_response():
    return {
        "picture": "https://d1w2poirtb3as9.cloudfront.net/f3be498cb0bbf570aa3d.jpeg",
        "first_name": "Uber",
        "last_name": "Developer",
        "uuid": "f4a416e3-6016-4623-8ec9-d5ee105a6e27",
        "rider_id": "8OlTlUG1TyeAQf1JiBZZdkKxuSSOUwu2IkO0Hf9d2HV52Pm25A0NvsbmbnZr85tLVi-s8CckpBK8Eq0Nke4X-no3AcSHfeVh6J5O6LiQt5LsBZDSi4qyVUdSLeYDnTtirw==",
        "email": "uberdevelopers@gmail.com",
        "mobile_verified": True,
        "promo_code": "uberd340ue",
    }
