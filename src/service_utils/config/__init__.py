"""
service_utils Configuration Module.

Each sub-module represents an independent concern with its own environment
variable prefix.

Usage:
    from service_utils.config import LoggingSettings

    LoggingSettings().format  # LogFormat.CONSOLE, or SVC_LOG_FORMAT
"""

from .logging import LogFormat, LoggingSettings, LogStream

__all__ = ["LogFormat", "LogStream", "LoggingSettings"]
