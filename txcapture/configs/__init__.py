from pydantic_settings import SettingsConfigDict

from txcapture.configs.common import LoggingConfig
from txcapture.configs.http_client import HttpClientConfig


class AppConfig(HttpClientConfig, LoggingConfig):
    model_config = SettingsConfigDict(
        env_prefix="TXCAPTURE_",
        # read from dotenv format config file
        env_file=".env",
        env_file_encoding="utf-8",
        # ignore extra attributes
        extra="ignore",
    )


app_config: AppConfig = AppConfig()

__all__ = ["AppConfig", "app_config"]
