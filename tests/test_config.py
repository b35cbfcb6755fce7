"""
Tests for uber_rides.config module.
"""

import pytest

from uber_rides.config import UberConfig, get_config
from uber_rides.errors import InvalidArgument

ENV_VARS = [
    "UBER_API_BASE",
    "UBER_API_VERSION",
    "UBER_AUTH_BASE",
    "UBER_TIMEOUT",
    "UBER_CLIENT_ID",
    "UBER_CLIENT_SECRET",
    "UBER_REDIRECT_URI",
    "UBER_SERVER_TOKEN",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    yield monkeypatch
    get_config.cache_clear()


class TestUberConfig:

    def test_defaults(self):
        config = UberConfig()
        assert config.api_base == "https://api.uber.com"
        assert config.api_version == "v1.2"
        assert config.timeout is None
        assert config.token_url == "https://login.uber.com/oauth/v2/token"

    def test_token_url_follows_auth_base(self):
        config = UberConfig(auth_base="https://auth.example.com/")
        assert config.token_url == "https://auth.example.com/oauth/v2/token"

    def test_from_env_defaults(self, clean_env):
        assert UberConfig.from_env() == UberConfig()

    def test_from_env_reads_values(self, clean_env):
        clean_env.setenv("UBER_API_BASE", "https://sandbox-api.uber.com")
        clean_env.setenv("UBER_TIMEOUT", "7.5")
        clean_env.setenv("UBER_CLIENT_ID", "cid")
        clean_env.setenv("UBER_CLIENT_SECRET", "secret")
        clean_env.setenv("UBER_REDIRECT_URI", "https://example.com/cb")
        clean_env.setenv("UBER_SERVER_TOKEN", "server-token")

        config = UberConfig.from_env()

        assert config.api_base == "https://sandbox-api.uber.com"
        assert config.timeout == 7.5
        assert config.server_token == "server-token"
        assert config.can_exchange_codes()

    def test_from_env_bad_timeout(self, clean_env):
        clean_env.setenv("UBER_TIMEOUT", "soon")
        with pytest.raises(InvalidArgument, match="UBER_TIMEOUT"):
            UberConfig.from_env()

    def test_cannot_exchange_without_secret(self):
        assert not UberConfig(client_id="cid", redirect_uri="https://e.com/cb").can_exchange_codes()

    def test_refresh_needs_no_redirect_uri(self):
        config = UberConfig(client_id="cid", client_secret="secret")
        assert config.can_refresh_tokens()
        assert not config.can_exchange_codes()
        assert not UberConfig(client_id="cid").can_refresh_tokens()

    def test_get_config_is_cached(self, clean_env):
        clean_env.setenv("UBER_CLIENT_ID", "first")
        first = get_config()
        clean_env.setenv("UBER_CLIENT_ID", "second")
        assert get_config() is first
        assert get_config().client_id == "first"
