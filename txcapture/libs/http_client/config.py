from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveFloat

from txcapture.configs import AppConfig, app_config
from txcapture.libs.helper import merge_recursive_distinct

from .history import TransactionHistory
from .pool import PoolLimits, ProxyConfig, build_timeout, proxy_url
from .types import Middleware, RequestFactory, TransportFactory


class ClientConfig(BaseModel):
    """Merged per-client configuration; replaced only through ``TransactionClient.reset``."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    connect_timeout: PositiveFloat = 5
    timeout: PositiveFloat = 10
    proxy: str | ProxyConfig | None = None
    pool_limits: PoolLimits = Field(default_factory=PoolLimits)
    follow_redirects: bool = True
    max_redirects: NonNegativeInt = 5
    http_errors: bool = True
    debug: bool = True
    headers: dict[str, str] = Field(default_factory=dict)
    transport_factory: TransportFactory | None = None
    request_factory: RequestFactory | None = None
    history: TransactionHistory | None = None
    middlewares: list[Middleware] = Field(default_factory=list)

    @classmethod
    def defaults(cls, settings: AppConfig | None = None) -> dict[str, Any]:
        settings = settings or app_config
        return {
            "connect_timeout": settings.CONNECT_TIMEOUT,
            "timeout": settings.TIMEOUT,
            "proxy": settings.PROXY,
            "pool_limits": PoolLimits(
                max_connections=settings.POOL_MAX_CONNECTIONS,
                max_keepalive=settings.POOL_MAX_KEEPALIVE,
                keepalive_expiry=settings.POOL_KEEPALIVE_EXPIRY,
            ),
            "follow_redirects": settings.FOLLOW_REDIRECTS,
            "max_redirects": settings.MAX_REDIRECTS,
            "http_errors": settings.HTTP_ERRORS,
            "debug": settings.DEBUG_CAPTURE,
        }

    @classmethod
    def merged(
        cls,
        config: Mapping[str, Any] | None = None,
        proxy_config: Mapping[str, Any] | None = None,
    ) -> "ClientConfig":
        proxy = {"proxy": proxy_config["proxy"]} if proxy_config and proxy_config.get("proxy") else None
        return cls.model_validate(merge_recursive_distinct(cls.defaults(), proxy, config))

    def httpx_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "timeout": build_timeout(self.timeout, self.connect_timeout),
            "follow_redirects": self.follow_redirects,
            "max_redirects": self.max_redirects,
            "headers": self.headers,
        }
        if self.transport_factory is not None:
            # a custom transport owns its own pooling and proxying
            kwargs["transport"] = self.transport_factory()
        else:
            kwargs["limits"] = self.pool_limits.to_httpx_limits()
            kwargs["proxy"] = proxy_url(self.proxy)
        return kwargs

    def describe(self) -> dict[str, Any]:
        """Loggable view: callables and the history handle are reduced to flags."""
        return {
            "connect_timeout": self.connect_timeout,
            "timeout": self.timeout,
            "proxy": proxy_url(self.proxy),
            "follow_redirects": self.follow_redirects,
            "max_redirects": self.max_redirects,
            "http_errors": self.http_errors,
            "debug": self.debug,
            "custom_transport": self.transport_factory is not None,
            "custom_request_factory": self.request_factory is not None,
            "shared_history": self.history is not None,
            "middlewares": len(self.middlewares),
        }


class RequestOptions(BaseModel):
    """Per-call options accepted by ``make_request`` and ``create_request``."""

    model_config = ConfigDict(extra="forbid")

    headers: dict[str, str | list[str]] = Field(default_factory=dict)
    body: bytes | str | None = None
    json_body: Any = Field(default=None, alias="json")
    query: dict[str, Any] | None = None
    timeout: PositiveFloat | None = None
    follow_redirects: bool | None = None
    http_errors: bool | None = None
    debug: bool | None = None

    @classmethod
    def parse(cls, options: Mapping[str, Any] | None) -> "RequestOptions":
        try:
            return cls.model_validate(dict(options or {}))
        except ValueError as exc:
            raise ValueError(f"Invalid request options: {exc}") from exc

    def header_pairs(self) -> list[tuple[str, str]]:
        pairs: list[tuple[str, str]] = []
        for name, value in self.headers.items():
            values = value if isinstance(value, list) else [value]
            pairs.extend((name, item) for item in values)
        return pairs

    def loggable(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True, exclude_defaults=True, by_alias=True)
