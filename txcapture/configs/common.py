from pydantic import Field, PositiveInt
from pydantic_settings import BaseSettings


class LoggingConfig(BaseSettings):
    LOG_LEVEL: str = Field(
        description="Root log level",
        default="INFO",
    )

    LOG_FILE: str | None = Field(
        description="Optional log file path; rotated by size",
        default=None,
    )

    LOG_FILE_MAX_SIZE: PositiveInt = Field(
        description="Maximum log file size in megabytes before rotation",
        default=20,
    )

    LOG_FILE_BACKUP_COUNT: PositiveInt = Field(
        description="Number of rotated log files kept",
        default=5,
    )

    LOG_FORMAT: str = Field(
        description="Log record format",
        default="%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] [%(filename)s:%(lineno)d]"
        " %(trace_id)s - %(message)s",
    )

    LOG_DATEFORMAT: str | None = Field(
        description="Log date format",
        default="%Y-%m-%d %H:%M:%S",
    )

    LOG_TZ: str | None = Field(
        description="Timezone for log timestamps, e.g. UTC or Asia/Shanghai",
        default=None,
    )
