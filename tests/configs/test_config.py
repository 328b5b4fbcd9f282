import httpx
import pytest
from pydantic import ValidationError

from txcapture.configs import AppConfig
from txcapture.libs.http_client.config import ClientConfig, RequestOptions
from txcapture.libs.http_client.history import TransactionHistory
from txcapture.libs.http_client.pool import PoolLimits, ProxyConfig


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig(_env_file=None)
        assert config.CONNECT_TIMEOUT == 5
        assert config.TIMEOUT == 10
        assert config.FOLLOW_REDIRECTS is True
        assert config.HTTP_ERRORS is True
        assert config.LOG_LEVEL == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TXCAPTURE_TIMEOUT", "30")
        monkeypatch.setenv("TXCAPTURE_PROXY", "http://proxy.example.com:8080")
        monkeypatch.setenv("TXCAPTURE_LOG_LEVEL", "DEBUG")

        config = AppConfig(_env_file=None)

        assert config.TIMEOUT == 30
        assert config.PROXY == "http://proxy.example.com:8080"
        assert config.LOG_LEVEL == "DEBUG"

    def test_invalid_env(self, monkeypatch):
        monkeypatch.setenv("TXCAPTURE_CONNECT_TIMEOUT", "-1")
        with pytest.raises(ValidationError):
            AppConfig(_env_file=None)


class TestClientConfig:
    def test_defaults_from_settings(self, monkeypatch):
        monkeypatch.setenv("TXCAPTURE_MAX_REDIRECTS", "2")
        defaults = ClientConfig.defaults(AppConfig(_env_file=None))
        assert defaults["max_redirects"] == 2
        assert defaults["pool_limits"] == PoolLimits()

    def test_merged(self):
        config = ClientConfig.merged({"timeout": 3, "headers": {"X-Foo": "bar"}})
        assert config.timeout == 3
        assert config.connect_timeout == 5
        assert config.headers == {"X-Foo": "bar"}

    def test_proxy_config(self):
        config = ClientConfig.merged(None, {"proxy": "http://proxy.example.com:8080"})
        assert config.proxy == "http://proxy.example.com:8080"
        assert config.httpx_kwargs()["proxy"] == "http://proxy.example.com:8080"

    def test_explicit_config_wins_over_proxy_config(self):
        config = ClientConfig.merged({"proxy": "http://a:1"}, {"proxy": "http://b:2"})
        assert config.proxy == "http://a:1"

    def test_proxy_with_auth(self):
        config = ClientConfig.merged({"proxy": ProxyConfig(url="http://proxy:3128", auth=("user", "pw"))})
        assert config.httpx_kwargs()["proxy"] == "http://user:pw@proxy:3128"

    def test_history_kept_by_identity(self):
        shared = TransactionHistory()
        assert ClientConfig.merged({"history": shared}).history is shared

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            ClientConfig.merged({"retries": 3})

    def test_invalid_timeout_rejected(self):
        with pytest.raises(ValidationError):
            ClientConfig.merged({"timeout": 0})

    def test_transport_factory_replaces_pool(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200))
        kwargs = ClientConfig.merged({"transport_factory": lambda: transport}).httpx_kwargs()
        assert kwargs["transport"] is transport
        assert "limits" not in kwargs

    def test_describe(self):
        description = ClientConfig.merged({"history": TransactionHistory()}).describe()
        assert description["shared_history"] is True
        assert description["custom_transport"] is False


class TestRequestOptions:
    def test_json_alias(self):
        options = RequestOptions.parse({"json": {"a": 1}})
        assert options.json_body == {"a": 1}
        assert options.loggable() == {"json": {"a": 1}}

    def test_header_pairs(self):
        options = RequestOptions.parse({"headers": {"X-One": "1", "X-Many": ["a", "b"]}})
        assert options.header_pairs() == [("X-One", "1"), ("X-Many", "a"), ("X-Many", "b")]

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="Invalid request options"):
            RequestOptions.parse({"retries": 3})

    def test_empty(self):
        options = RequestOptions.parse(None)
        assert options.header_pairs() == []
        assert options.body is None
