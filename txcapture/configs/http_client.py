from pydantic import Field, NonNegativeInt, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings


class HttpClientConfig(BaseSettings):
    """
    Defaults for every TransactionClient, overridable per client via its config mapping
    """

    CONNECT_TIMEOUT: PositiveFloat = Field(
        description="Seconds allowed for establishing a connection",
        default=5,
    )

    TIMEOUT: PositiveFloat = Field(
        description="Seconds allowed for each read, write and pool acquisition",
        default=10,
    )

    PROXY: str | None = Field(
        description="Proxy URL applied to all requests, e.g. http://proxy.example.com:8080",
        default=None,
    )

    FOLLOW_REDIRECTS: bool = Field(
        description="Whether redirects are followed; every hop is recorded",
        default=True,
    )

    MAX_REDIRECTS: NonNegativeInt = Field(
        description="Maximum redirect hops before the call fails",
        default=5,
    )

    HTTP_ERRORS: bool = Field(
        description="Raise 4xx/5xx final responses so they pass through the error mapping",
        default=True,
    )

    DEBUG_CAPTURE: bool = Field(
        description="Capture connection-level trace output for each call",
        default=True,
    )

    POOL_MAX_CONNECTIONS: PositiveInt = Field(
        description="Maximum number of concurrent connections",
        default=100,
    )

    POOL_MAX_KEEPALIVE: NonNegativeInt = Field(
        description="Maximum number of idle keep-alive connections",
        default=20,
    )

    POOL_KEEPALIVE_EXPIRY: PositiveFloat = Field(
        description="Seconds an idle keep-alive connection is kept",
        default=30.0,
    )
