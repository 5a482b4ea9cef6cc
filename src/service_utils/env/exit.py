"""
Fail-fast adapters.

These terminate the process instead of returning; they belong to an
application's startup sequence, never to reusable library code.
"""

from __future__ import annotations

import os
import sys
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, NoReturn, TypeVar

from ..logging.core import close_sinks, get_logger
from .reader import get_env

T = TypeVar("T")

EXIT_FAILURE = 1
EXIT_MISSING_ENV = 2

logger = get_logger("service_utils.exit")


def _terminate(code: int) -> NoReturn:
    """Exit the process, also when called from a worker thread.

    ``SystemExit`` only ends the current thread, so off the main thread the
    sinks are closed and the process is ended with ``os._exit``.
    """
    if threading.current_thread() is threading.main_thread():
        sys.exit(code)
    close_sinks()
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(code)


def get_env_exit(key: str) -> str:
    """Return the value of a required variable or exit with status 2."""
    value = get_env(key)
    if value is None:
        logger.error(f"Env var {key} not set.")
        _terminate(EXIT_MISSING_ENV)
    return value


def exit_on_error(operation: Callable[..., T], message: str, *args: Any, **kwargs: Any) -> T:
    """Call ``operation`` and return its result, or log and exit with status 1.

    >>> port = exit_on_error(int, "Invalid port", "8080")
    """
    try:
        return operation(*args, **kwargs)
    except Exception as e:
        logger.error(f"{message}: {e}")
        _terminate(EXIT_FAILURE)


def _render_chain(exc: BaseException) -> str:
    parts: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        parts.append(str(current) or type(current).__name__)
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return ": ".join(parts)


@contextmanager
def exit_on_failure(message: str) -> Iterator[None]:
    """Context manager form of :func:`exit_on_error`.

    The diagnostic includes the exception's cause chain::

        with exit_on_failure("Failed to load config"):
            config = load_config(path)
    """
    try:
        yield
    except Exception as e:
        logger.error(f"{message}: {_render_chain(e)}")
        _terminate(EXIT_FAILURE)
