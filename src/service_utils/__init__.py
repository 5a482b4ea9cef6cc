"""
service_utils: shared helpers for service entry points.

- :func:`setup_logs` installs process-wide structured logging
- :func:`wait_for_signal` waits for SIGINT/SIGTERM
- :func:`get_env` and friends read and validate environment variables
"""

from .env import (
    EnvReaderSettings,
    EnvStatus,
    EnvValue,
    exit_on_error,
    exit_on_failure,
    get_env,
    get_env_exit,
    read_env,
)
from .logging import FilterParseError, LogHandle, get_logger, setup_logs
from .signals import wait_for_signal

__version__ = "0.1.0"

__all__ = [
    "EnvReaderSettings",
    "EnvStatus",
    "EnvValue",
    "FilterParseError",
    "LogHandle",
    "exit_on_error",
    "exit_on_failure",
    "get_env",
    "get_env_exit",
    "get_logger",
    "read_env",
    "setup_logs",
    "wait_for_signal",
]
