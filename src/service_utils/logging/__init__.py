"""
Process-wide structured logging.

A single call to :func:`setup_logs` installs a structlog pipeline filtered by
``target=level`` directives, taken from ``LOG_FILTER`` when set or derived from
the calling package's name otherwise.

Library: structlog + orjson for JSON rendering.
"""

from .core import (
    DEFAULT_FILTER_ENV,
    SHARED_LIBRARY_NAME,
    LogHandle,
    default_directives,
    get_logger,
    reset_logging,
    setup_logs,
)
from .filters import Directive, FilterParseError, FilterSpec

__all__ = [
    "DEFAULT_FILTER_ENV",
    "SHARED_LIBRARY_NAME",
    "Directive",
    "FilterParseError",
    "FilterSpec",
    "LogHandle",
    "default_directives",
    "get_logger",
    "reset_logging",
    "setup_logs",
]
