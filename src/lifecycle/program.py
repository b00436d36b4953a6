"""
Program handle
--------------

The object handed to the caller's wiring function. It owns the registry, the
lifecycle state, the start task, the shutdown coordinator and the signal
subscription.
"""

from __future__ import annotations

import asyncio
import signal
from typing import Any, Optional

from lifecycle.models.enums import LifecyclePhase, LogCategory
from lifecycle.models.settings import LifecycleSettings
from lifecycle.models.status import LifecycleStatus
from lifecycle.registry import ComponentRegistry
from lifecycle.shutdown_coordinator import ShutdownCoordinator, StopHook
from lifecycle.signal_subscription import SignalSubscription
from lifecycle.start_sequencer import StartSequencer
from lifecycle.state import LifecycleState
from lifecycle.utils import get_category_logger

log = get_category_logger(LogCategory.LIFECYCLE)


class Program:
    """
    Handle over a component-based program.

    Usage (inside the wiring function passed to run()):

        async def main(program: Program) -> None:
            program.components.server.route("/ping", ping)
            program.before_stop_components(drain_queue)
            await program.start_components()

    start_components() and stop() return shared asyncio tasks: calling them
    again joins the first call instead of repeating any work.
    """

    def __init__(self, components: Any, settings: Optional[LifecycleSettings] = None):
        self._settings = settings or LifecycleSettings()
        self._registry = ComponentRegistry.freeze(components)
        self._state = LifecycleState()
        self._signals = SignalSubscription(self._on_signal)
        self._sequencer = StartSequencer(self._registry, self._state, self._settings)
        self._coordinator = ShutdownCoordinator(self._registry, self._state, self._signals)
        self._stop_requested = asyncio.Event()
        self._state.advance(LifecyclePhase.WIRING)

    # -----------------------------
    # Read-only views
    # -----------------------------
    @property
    def components(self) -> ComponentRegistry:
        """
        The frozen registry. Meant for wiring and debugging, not for
        reaching into components from request handlers.
        """
        return self._registry

    @property
    def settings(self) -> LifecycleSettings:
        return self._settings

    @property
    def live(self) -> bool:
        return self._state.live

    @property
    def started(self) -> bool:
        return self._state.started

    @property
    def phase(self) -> LifecyclePhase:
        return self._state.phase

    @property
    def start_requested(self) -> bool:
        return self._state.start_task is not None

    @property
    def start_task(self) -> Optional[asyncio.Task]:
        return self._state.start_task

    @property
    def listening_for_signals(self) -> bool:
        return self._signals.active

    def status(self) -> LifecycleStatus:
        return LifecycleStatus(
            phase=self._state.phase.name,
            live=self._state.live,
            started=self._state.started,
            components=self._registry.names(),
            stopped=[name for name in self._registry if name in self._state.stopped],
            pending_hooks=self._coordinator.pending_hooks,
            shutdown_reason=self._state.shutdown_reason,
        )

    # -----------------------------
    # Lifecycle operations
    # -----------------------------
    def start_components(self) -> asyncio.Task:
        """
        Start every component in registry order.

        Only the first call dispatches; later calls log a warning and return
        the same task.
        """
        if self._state.start_task is None:
            self._state.start_task = asyncio.ensure_future(self._sequencer.run())
        else:
            log.warn("start_components must be called once")
        return self._state.start_task

    def before_stop_components(self, hook: StopHook) -> None:
        """Run ``hook`` (sync or async, no arguments) before components are stopped."""
        self._coordinator.register(hook)

    def stop(self, reason: str = "explicit") -> asyncio.Task:
        """
        Gracefully stop the program: pre-stop hooks, then components in
        reverse order. Idempotent; every call returns the same task.
        """
        task = self._coordinator.shutdown(reason)
        self._stop_requested.set()
        return task

    async def wait_stopped(self) -> None:
        """Block until stop() was requested and finished; re-raises its failure."""
        await self._stop_requested.wait()
        await asyncio.shield(self._coordinator.task)

    # -----------------------------
    # Signals
    # -----------------------------
    def listen_for_signals(self) -> None:
        """Route SIGTERM and SIGINT to stop(). Called once startup succeeded."""
        if self._stop_requested.is_set():
            log.debug("Stop already requested, not listening for signals")
            return
        self._signals.install()

    def _on_signal(self, sig: signal.Signals) -> None:
        log.info("Termination signal received", signal=sig.name)
        self.stop(reason=sig.name)
