"""
Termination signal handling.

:func:`wait_for_signal` only waits; racing it against other shutdown
triggers is up to the caller::

    stop = asyncio.create_task(wait_for_signal())
    done, _ = await asyncio.wait({stop, server_task}, return_when=asyncio.FIRST_COMPLETED)
"""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Sequence

from .logging.core import get_logger

logger = get_logger("service_utils.signals")

SIGNAL_NAMES = {
    signal.SIGINT: "interrupt",
    signal.SIGTERM: "terminate",
}


def termination_signals() -> tuple[signal.Signals, ...]:
    """Signals that request termination on this platform."""
    if sys.platform == "win32":
        return (signal.SIGINT,)
    return (signal.SIGINT, signal.SIGTERM)


async def _wait_with_loop_handlers(signums: Sequence[signal.Signals]) -> signal.Signals:
    """Wait using the event loop's signal handlers (POSIX)."""
    loop = asyncio.get_running_loop()
    received: asyncio.Future[signal.Signals] = loop.create_future()

    def on_signal(signum: signal.Signals) -> None:
        if not received.done():
            received.set_result(signum)

    # The loop keeps one handler per signal; anything the application already
    # registered is put back once the wait is over.
    existing: dict[int, asyncio.Handle] = dict(getattr(loop, "_signal_handlers", {}))

    registered: list[signal.Signals] = []
    try:
        for signum in signums:
            loop.add_signal_handler(signum, on_signal, signum)
            registered.append(signum)
        return await received
    finally:
        for signum in registered:
            loop.remove_signal_handler(signum)
            previous = existing.get(signum)
            if previous is not None and not previous.cancelled():
                loop.add_signal_handler(signum, previous._callback, *previous._args)


async def _wait_with_signal_module(signums: Sequence[signal.Signals]) -> signal.Signals:
    """Wait using ``signal.signal`` for loops without signal handler support (Windows)."""
    loop = asyncio.get_running_loop()
    received: asyncio.Future[signal.Signals] = loop.create_future()

    def deliver(signum: signal.Signals) -> None:
        if not received.done():
            received.set_result(signum)

    def on_signal(signum: int, frame: object) -> None:
        loop.call_soon_threadsafe(deliver, signal.Signals(signum))

    previous: dict[signal.Signals, object] = {}
    try:
        for signum in signums:
            previous[signum] = signal.signal(signum, on_signal)
        return await received
    finally:
        for signum, handler in previous.items():
            # None means the previous handler was not installed from Python
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


async def wait_for_signal() -> signal.Signals:
    """
    Suspend until the process is asked to terminate.

    Waits for SIGINT, plus SIGTERM where the platform distinguishes them; the
    first one to arrive wins. Every handler installed here is removed before
    returning, including when registration fails or the wait is cancelled, and
    handlers the application had already registered on the loop are restored.

    Returns:
        The signal that was received.

    Raises:
        RuntimeError, ValueError, NotImplementedError, OSError: a handler could
        not be registered. Propagated as is.
    """
    signums = termination_signals()
    if sys.platform == "win32":
        signum = await _wait_with_signal_module(signums)
    else:
        signum = await _wait_with_loop_handlers(signums)

    logger.info(f"Received {SIGNAL_NAMES.get(signum, signum.name)} signal, shutting down...")
    return signum
