"""
Termination-signal subscription.

Holds the SIGTERM/SIGINT listeners as an explicit resource: installed once
after the program started, released as the first step of every shutdown.
"""

from __future__ import annotations

import asyncio
import signal
from typing import Callable, Optional, Tuple

from lifecycle.models.enums import LogCategory
from lifecycle.utils import get_category_logger

log = get_category_logger(LogCategory.SIGNAL)

TERMINATION_SIGNALS: Tuple[signal.Signals, ...] = (signal.SIGTERM, signal.SIGINT)

SignalCallback = Callable[[signal.Signals], None]


class SignalSubscription:
    """
    Scoped registration of termination-signal listeners on an event loop.

    install() and release() are idempotent. Usable as a context manager:

        with SignalSubscription(on_signal) as subscription:
            await subscription_owner.wait_stopped()
    """

    def __init__(
        self,
        callback: SignalCallback,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        signals: Tuple[signal.Signals, ...] = TERMINATION_SIGNALS,
    ):
        self._callback = callback
        self._loop = loop
        self._signals = signals
        self._installed: Tuple[signal.Signals, ...] = ()

    @property
    def active(self) -> bool:
        return bool(self._installed)

    def install(self) -> None:
        """
        Install OS signal handlers.

        Must be called from the thread running the event loop.
        """
        if self._installed:
            return

        loop = self._loop or asyncio.get_running_loop()
        self._loop = loop
        installed = []
        for sig in self._signals:
            try:
                loop.add_signal_handler(sig, self._callback, sig)
            except (NotImplementedError, RuntimeError) as ex:
                # Platforms without loop signal support (e.g. Windows proactor)
                log.warn(f"Cannot listen for {sig.name}", error=str(ex))
                continue
            installed.append(sig)

        self._installed = tuple(installed)
        if self._installed:
            log.info(
                "Signal handlers installed",
                signals=", ".join(s.name for s in self._installed),
            )

    def release(self) -> None:
        """Remove the handlers installed by install(); no-op when none are."""
        if not self._installed:
            return

        for sig in self._installed:
            self._loop.remove_signal_handler(sig)
        log.debug(
            "Signal handlers removed",
            signals=", ".join(s.name for s in self._installed),
        )
        self._installed = ()

    def __enter__(self) -> "SignalSubscription":
        self.install()
        return self

    def __exit__(self, *exc) -> None:
        self.release()
