"""
Logging Configuration.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class LogStream(str, Enum):
    STDOUT = "stdout"
    STDERR = "stderr"


class LoggingSettings(BaseSettings):
    """Logging sink configuration.

    The filter directive itself is not part of these settings; it is resolved
    by :func:`service_utils.logging.setup_logs` from its override variable.
    """

    model_config = SettingsConfigDict(
        env_prefix="SVC_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    format: LogFormat = Field(default=LogFormat.CONSOLE, description="Output format")
    stream: LogStream = Field(default=LogStream.STDERR, description="Stream for the stdio sink")
    file_path: str | None = Field(default=None, description="Optional path for a JSON file sink")
    file_max_bytes: int = Field(default=10 * 1024 * 1024, description="Rotate the file sink above this size")
    file_backup_count: int = Field(default=5, description="Rotated files to keep")
    show_logger: bool = Field(default=False, description="Render the logger column in console output")
    console_timestamp_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Console timestamp format",
    )
    console_level_width: int = Field(default=5, description="Console level column width")
    console_logger_width: int = Field(default=32, description="Console logger column width")
    console_separator: str = Field(default=" ", description="Console column separator")
