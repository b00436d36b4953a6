"""Lifecycle state shared by the start sequencer and shutdown coordinator."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Set

from lifecycle.models.enums import LifecyclePhase, LogCategory
from lifecycle.utils import get_category_logger

log = get_category_logger(LogCategory.LIFECYCLE)

_TRANSITIONS: Dict[LifecyclePhase, FrozenSet[LifecyclePhase]] = {
    LifecyclePhase.CONSTRUCTING: frozenset({LifecyclePhase.WIRING, LifecyclePhase.STOPPING}),
    LifecyclePhase.WIRING: frozenset({LifecyclePhase.STARTING, LifecyclePhase.STOPPING}),
    LifecyclePhase.STARTING: frozenset({
        LifecyclePhase.RUNNING, LifecyclePhase.START_FAILED, LifecyclePhase.STOPPING,
    }),
    LifecyclePhase.RUNNING: frozenset({LifecyclePhase.STOPPING}),
    LifecyclePhase.START_FAILED: frozenset({LifecyclePhase.STOPPING}),
    LifecyclePhase.STOPPING: frozenset({LifecyclePhase.TERMINATED}),
    LifecyclePhase.TERMINATED: frozenset(),
}


@dataclass
class LifecycleState:
    """
    Mutable flags owned by the controller.

    Only the start sequencer and shutdown coordinator write to this, and only
    between hook calls, never while a hook is running.
    """
    live: bool = False
    started: bool = False
    phase: LifecyclePhase = LifecyclePhase.CONSTRUCTING
    start_task: Optional[asyncio.Task] = None
    stopped: Set[str] = field(default_factory=set)
    shutdown_reason: Optional[str] = None

    def advance(self, phase: LifecyclePhase) -> bool:
        """
        Move to ``phase`` if the state machine allows it.

        Returns False (and leaves the phase untouched) for illegal moves such
        as STOPPING → RUNNING when a slow start resolves after shutdown began.
        """
        if phase not in _TRANSITIONS[self.phase]:
            log.debug(f"Ignoring phase change {self.phase.name} → {phase.name}")
            return False
        log.debug(f"Phase {self.phase.name} → {phase.name}")
        self.phase = phase
        return True


class StartOptions:
    """Read-only view of the lifecycle state passed to every start hook."""

    __slots__ = ("_state", "_components")

    def __init__(self, state: LifecycleState, components: Mapping[str, Any]):
        self._state = state
        self._components = components

    def started(self) -> bool:
        return self._state.started

    def live(self) -> bool:
        return self._state.live

    def get_components(self) -> Mapping[str, Any]:
        return self._components
