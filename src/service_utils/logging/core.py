"""
Core logging configuration and initialization logic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence

import structlog
from structlog.typing import EventDict, WrappedLogger

from ..config import LoggingSettings
from .filters import DirectiveFilter, FilterSpec
from .interceptors import install_stdlib_redirect
from .sinks import BaseSink, build_sinks

SHARED_LIBRARY_NAME = "service_utils"
DEFAULT_FILTER_ENV = "LOG_FILTER"

# =============================================================================
# Global State
# =============================================================================

_sinks: list[BaseSink] = []
_handle: LogHandle | None = None


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(_name=name or "root")


@dataclass(frozen=True)
class LogHandle:
    """Proof that the process-wide logging pipeline has been installed.

    Returned by :func:`setup_logs`. The pipeline cannot be reconfigured within
    the same process; a different filter needs a restart.
    """

    directives: str
    filter_spec: FilterSpec
    settings: LoggingSettings = field(repr=False)

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        return get_logger(name)


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Move the bound ``_name`` into the ``logger`` key."""
    event_dict["logger"] = event_dict.pop("_name", "root")
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def multi_sink_renderer(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
    """Render log to all configured sinks. Returns empty to suppress default output."""
    for sink in _sinks:
        try:
            sink.emit(event_dict)
        except Exception:
            pass  # a broken sink must not break the caller
    return ""


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


class SilentPrintLoggerFactory:
    """Logger factory that returns a logger writing to nowhere."""

    def __call__(self, *args: object) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=_NOP_FILE)


# =============================================================================
# Configuration Logic
# =============================================================================


def default_directives(package_name: str, extra_directives: Sequence[str] = ()) -> str:
    """Build the filter used when no override variable is set.

    >>> default_directives("my-pkg", ["foo=trace"])
    'my_pkg=debug,service_utils=debug,foo=trace'
    """
    pkg_name = package_name.replace("-", "_")
    return ",".join([f"{pkg_name}=debug", f"{SHARED_LIBRARY_NAME}=debug", *extra_directives])


def resolve_directives(
    package_name: str,
    extra_directives: Sequence[str] = (),
    filter_env: str = DEFAULT_FILTER_ENV,
) -> str:
    """Return the override variable's value if set, else the synthesized default."""
    # Imported here to avoid a cycle: env.reader logs through this module
    from ..env.reader import get_env

    override = get_env(filter_env)
    if override is not None:
        return override
    return default_directives(package_name, extra_directives)


def _configure_structlog(spec: FilterSpec) -> None:
    """Configure structlog processors and factory."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            add_timestamp,
            add_logger_name,
            DirectiveFilter(spec),
            rename_event_key,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            multi_sink_renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min(spec.min_level, logging.CRITICAL)),
        context_class=dict,
        logger_factory=SilentPrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def setup_logs(
    package_name: str,
    extra_directives: Sequence[str] = (),
    *,
    settings: LoggingSettings | None = None,
    filter_env: str = DEFAULT_FILTER_ENV,
) -> LogHandle:
    """
    Install the process-wide logging pipeline.

    Args:
        package_name: Name of the calling package; ``-`` becomes ``_``.
        extra_directives: Fragments appended to the default filter.
        settings: Sink configuration, read from ``SVC_LOG_*`` when omitted.
        filter_env: Variable whose value replaces the default filter entirely.

    Raises:
        FilterParseError: The resolved filter is malformed.

    Only the first call installs anything; later calls return the same handle.
    """
    global _handle

    if _handle is not None:
        return _handle

    directives = resolve_directives(package_name, extra_directives, filter_env)
    spec = FilterSpec.parse(directives)
    settings = settings or LoggingSettings()

    _sinks.extend(build_sinks(settings))
    _configure_structlog(spec)
    install_stdlib_redirect(spec.min_level)

    _handle = LogHandle(directives=directives, filter_spec=spec, settings=settings)
    get_logger(SHARED_LIBRARY_NAME).debug(f"Initialized logger with directives: {directives}")
    return _handle


def close_sinks() -> None:
    """Close every installed sink. Records emitted afterwards are discarded."""
    for sink in _sinks:
        sink.close()
    _sinks.clear()


def reset_logging() -> None:
    """Tear down the installed pipeline. Intended for tests."""
    global _handle

    close_sinks()
    _handle = None

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(logging.WARNING)
    structlog.reset_defaults()
