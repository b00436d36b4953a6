"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Runs the pre-stop hooks in registration order, then stops components in
reverse registry order. The whole sequence runs at most once per program.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Optional, Union

from lifecycle.capabilities import resolve_stop, warn_if_legacy
from lifecycle.exceptions import ConfigurationError
from lifecycle.models.enums import LifecyclePhase, LogCategory
from lifecycle.registry import ComponentRegistry
from lifecycle.signal_subscription import SignalSubscription
from lifecycle.state import LifecycleState
from lifecycle.utils import get_category_logger
from lifecycle.utils.aio import maybe_await

log = get_category_logger(LogCategory.SHUTDOWN)

StopHook = Callable[[], Union[Awaitable[Any], Any]]


async def stop_component(name: str, component: Any) -> bool:
    """
    Call the component's stop hook and wait for it.

    Returns False when the component has no stop hook. Exceptions from the
    hook propagate unchanged.
    """
    capability = resolve_stop(component)
    if not capability.present:
        return False

    log.info(f"Stopping component {name}")
    warn_if_legacy(name, capability)
    await maybe_await(capability.fn())
    return True


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of the registered components.

    Example:
        coordinator = ShutdownCoordinator(registry, state, subscription)
        coordinator.register(flush_metrics)

        await coordinator.shutdown()   # hooks FIFO, then components in reverse
        await coordinator.shutdown()   # same task, nothing runs twice
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        state: LifecycleState,
        signals: Optional[SignalSubscription] = None,
    ):
        """
        Initialize shutdown coordinator.

        Args:
            registry: Frozen component registry
            state: Shared lifecycle state (phase, already-stopped components)
            signals: Subscription released before anything else on shutdown
        """
        self._registry = registry
        self._state = state
        self._signals = signals
        self._hooks: Deque[StopHook] = deque()
        self._hooks_drained = False
        self._task: Optional[asyncio.Task] = None

    @property
    def pending_hooks(self) -> int:
        return len(self._hooks)

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def register(self, hook: StopHook) -> None:
        """
        Queue a zero-argument hook to run before components are stopped.

        Args:
            hook: Sync or async callable
        """
        if not callable(hook):
            raise ConfigurationError(f"before_stop_components expects a callable, got {hook!r}")
        if self._hooks_drained:
            log.warn(
                "Pre-stop hook registered after hooks already ran, it will not be called",
                hook=_hook_name(hook),
            )
            return

        self._hooks.append(hook)
        log.debug(f"Registered pre-stop hook: {_hook_name(hook)}")

    def shutdown(self, reason: str = "explicit") -> asyncio.Task:
        """
        Start (or join) the shutdown sequence.

        Releases the signal subscription synchronously, before anything else,
        so a signal arriving now cannot start a second teardown. Every call
        returns the same task.
        """
        if self._signals is not None:
            self._signals.release()

        if self._task is None:
            if self._state.shutdown_reason is None:
                self._state.shutdown_reason = reason
            self._task = asyncio.ensure_future(self._shutdown_all())
        return self._task

    async def _shutdown_all(self) -> None:
        log.info("Stopping components", reason=self._state.shutdown_reason)
        self._state.advance(LifecyclePhase.STOPPING)
        try:
            await self._run_hooks()
            await self._stop_components()
            log.info("Shutdown sequence complete")
        finally:
            self._state.advance(LifecyclePhase.TERMINATED)

    async def _run_hooks(self) -> None:
        """Drain the hook queue FIFO; failures are logged and skipped."""
        while self._hooks:
            hook = self._hooks.popleft()
            try:
                await maybe_await(hook())
            except Exception as e:
                log.error(
                    f"Error in pre-stop hook {_hook_name(hook)}",
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=e,
                )
        self._hooks_drained = True

    async def _stop_components(self) -> None:
        """Stop components last-to-first; the first failure aborts the rest."""
        for name, component in self._registry.reversed_items():
            if name in self._state.stopped:
                log.debug(f"Component {name} already stopped")
                continue
            self._state.stopped.add(name)
            try:
                await stop_component(name, component)
            except Exception as e:
                log.error(
                    f"Error stopping component {name}",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise


def _hook_name(hook: Any) -> str:
    return getattr(hook, "__qualname__", None) or repr(hook)
