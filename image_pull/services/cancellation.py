"""
Cooperative cancellation for pull operations.

A ``CancellationToken`` is the only way a pull is interrupted. Process
signals are one source that feeds it; tests and embedding code can cancel
it directly without touching process-wide signal state.
"""

import asyncio
import logging
import signal
from typing import Callable, List, Sequence

# Signals that request termination of a running pull
INTERRUPT_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class CancellationToken:
    """
    One-shot cancellation source.

    Callbacks run synchronously on the thread calling ``cancel()``, which for
    signal-driven cancellation is the event loop thread. Cancelling more than
    once has no further effect.
    """

    def __init__(self) -> None:
        """Initialize an uncancelled token."""
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._cancelled

    def add_callback(self, callback: Callable[[], None]) -> None:
        """
        Register a callback to run on cancellation.

        If the token is already cancelled the callback runs immediately.
        """
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[], None]) -> None:
        """Unregister a callback; unknown callbacks are ignored."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def cancel(self) -> None:
        """Request cancellation."""
        if self._cancelled:
            return
        self._cancelled = True
        for callback in list(self._callbacks):
            callback()


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    token: CancellationToken,
    signals: Sequence[int] = INTERRUPT_SIGNALS,
) -> List[int]:
    """
    Route termination signals delivered to the process into a token.

    Args:
        loop: Event loop that dispatches the signal handlers
        token: Token to cancel on delivery
        signals: Signals to watch

    Returns:
        The signals a handler was installed for
    """
    installed = []
    for signum in signals:
        try:
            loop.add_signal_handler(signum, token.cancel)
        except (NotImplementedError, RuntimeError, ValueError) as e:
            # Not the main thread, or no signal support on this platform
            logging.debug("Cannot watch signal %s: %s", signal.Signals(signum).name, e)
            continue
        installed.append(signum)
    return installed


def remove_signal_handlers(loop: asyncio.AbstractEventLoop, signals: Sequence[int]) -> None:
    """Remove handlers installed by install_signal_handlers()."""
    for signum in signals:
        loop.remove_signal_handler(signum)


__all__ = [
    "CancellationToken",
    "INTERRUPT_SIGNALS",
    "install_signal_handlers",
    "remove_signal_handlers",
]
