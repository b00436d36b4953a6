"""
Start sequencer
---------------

Dispatches component start hooks in registry order, joins the pending ones,
and flips the live/started flags. When a start fails, components that already
started are stopped (settle-all) before the original error is re-raised. When
shutdown begins mid-start, dispatching stops and nothing is left running.
"""

from __future__ import annotations

import asyncio
import inspect
from functools import partial
from typing import Dict, List, Optional, Set

from lifecycle.capabilities import resolve_start, warn_if_legacy
from lifecycle.models.enums import LifecyclePhase, LogCategory, RollbackScope, StartMode
from lifecycle.models.settings import LifecycleSettings
from lifecycle.registry import ComponentRegistry
from lifecycle.shutdown_coordinator import stop_component
from lifecycle.state import LifecycleState, StartOptions
from lifecycle.utils import get_category_logger

log = get_category_logger(LogCategory.LIFECYCLE)


class StartSequencer:
    """
    Runs the start phase exactly once per program.

    The program wraps run() in a single task, so the at-most-once guarantee
    lives there; this class only implements one pass of the sequence.
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        state: LifecycleState,
        settings: Optional[LifecycleSettings] = None,
    ):
        self._registry = registry
        self._state = state
        self._settings = settings or LifecycleSettings()

    @property
    def _stop_requested(self) -> bool:
        return self._state.shutdown_reason is not None

    async def run(self) -> None:
        state = self._state
        if self._stop_requested:
            log.warn("start_components called after stop, components are not started")
            return

        state.advance(LifecyclePhase.STARTING)
        log.info("Starting components")

        options = StartOptions(state, self._registry)
        sequential = self._settings.start_mode is StartMode.SEQUENTIAL

        pending: Dict[str, asyncio.Future] = {}
        dispatched: List[str] = []
        failed: Set[str] = set()
        failure: Optional[BaseException] = None

        # live flips before the first hook so hooks and observers see it while starts are pending
        state.live = True

        for name, component in self._registry.items():
            if self._stop_requested:
                break

            capability = resolve_start(component)
            if not capability.present:
                continue
            warn_if_legacy(name, capability)

            log.debug(f"Starting component {name}")
            try:
                result = capability.fn(options)
            except Exception as exc:
                failed.add(name)
                failure = exc
                self._log_start_error(name, exc)
                break

            dispatched.append(name)
            if not inspect.isawaitable(result):
                continue

            future = asyncio.ensure_future(result)
            future.add_done_callback(partial(self._on_start_done, name))
            pending[name] = future

            if sequential:
                try:
                    await future
                except Exception as exc:
                    failure = exc
                    break

        if failure is None and pending:
            failure = await self._join(pending)
        failed.update(name for name, future in pending.items() if future.done() and self._failed(future))

        if failure is not None:
            log.error("Error initializing components. Stopping components and closing application.")
            state.advance(LifecyclePhase.START_FAILED)
            await self._rollback(self._rollback_targets(dispatched, pending, failed), pending)
            raise failure

        if self._stop_requested:
            # Shutdown began mid-start: whatever the coordinator has not stopped yet is stopped here
            log.warn("Stop requested while starting, remaining components are not started")
            await self._rollback([name for name in reversed(dispatched) if name not in failed], pending)
            return

        state.started = True
        state.advance(LifecyclePhase.RUNNING)
        log.info("Components started", dispatched=len(dispatched), awaited=len(pending))

    # -----------------------------
    # Joining
    # -----------------------------
    async def _join(self, pending: Dict[str, asyncio.Future]) -> Optional[BaseException]:
        """Wait until all starts resolve or one fails; return the first failure in dispatch order."""
        futures = list(pending.values())
        done, _ = await asyncio.wait(futures, return_when=asyncio.FIRST_EXCEPTION)

        for name, future in pending.items():
            if future not in done:
                continue
            if future.cancelled():
                return asyncio.CancelledError(f"start of component {name} was cancelled")
            if future.exception() is not None:
                return future.exception()
        return None

    @staticmethod
    def _failed(future: asyncio.Future) -> bool:
        return future.cancelled() or future.exception() is not None

    def _on_start_done(self, name: str, future: asyncio.Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            self._log_start_error(name, exc)

    @staticmethod
    def _log_start_error(name: str, exc: BaseException) -> None:
        log.error(
            f"Error initializing component {name!r}",
            component=name,
            error=str(exc),
            error_type=type(exc).__name__,
        )

    # -----------------------------
    # Rollback
    # -----------------------------
    def _rollback_targets(
        self,
        dispatched: List[str],
        pending: Dict[str, asyncio.Future],
        failed: Set[str],
    ) -> List[str]:
        if self._settings.rollback_scope is RollbackScope.DISPATCHED:
            targets = list(dispatched)
        else:
            targets = [name for name in dispatched if name in pending]
        return [name for name in reversed(targets) if name not in failed]

    async def _rollback(self, targets: List[str], pending: Dict[str, asyncio.Future]) -> None:
        """
        Stop ``targets`` concurrently, each one as soon as its own start has
        settled successfully. Components already stopped by the shutdown
        coordinator are skipped.
        """
        targets = [name for name in targets if name not in self._state.stopped]
        if not targets:
            return

        log.info("Rolling back started components", components=", ".join(targets))

        # settle-all: a failing stop must not hide the start failure or skip the others
        results = await asyncio.gather(
            *(self._rollback_one(name, pending.get(name)) for name in targets),
            return_exceptions=True,
        )
        for name, result in zip(targets, results):
            if isinstance(result, BaseException):
                log.error(
                    "Error stopping component during rollback",
                    component=name,
                    error=str(result),
                    error_type=type(result).__name__,
                )

    async def _rollback_one(self, name: str, start: Optional[asyncio.Future]) -> None:
        if start is not None:
            if not start.done():
                await asyncio.wait([start])
            if self._failed(start):
                return
        if name in self._state.stopped:
            return
        self._state.stopped.add(name)
        await stop_component(name, self._registry[name])
