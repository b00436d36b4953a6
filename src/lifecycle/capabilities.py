"""
Hook resolution for components.

resolve_start / resolve_stop are pure: they only look the hook up and report
which convention was found. Logging the deprecation is left to
warn_if_legacy so callers decide when the side effect happens.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from lifecycle.component_protocol import (
    LEGACY_START,
    LEGACY_STOP,
    START_COMPONENT,
    STOP_COMPONENT,
)
from lifecycle.models.enums import CapabilityKind, LogCategory
from lifecycle.utils import get_category_logger

log = get_category_logger(LogCategory.COMPONENT)


@dataclass(frozen=True)
class Capability:
    """A resolved lifecycle hook: CURRENT(fn), LEGACY(fn) or ABSENT."""
    kind: CapabilityKind
    hook: str
    fn: Optional[Callable[..., Any]] = None

    @property
    def present(self) -> bool:
        return self.kind is not CapabilityKind.ABSENT


def _resolve(component: Any, current: str, legacy: str) -> Capability:
    fn = getattr(component, current, None)
    if callable(fn):
        return Capability(CapabilityKind.CURRENT, current, fn)

    fn = getattr(component, legacy, None)
    if callable(fn):
        return Capability(CapabilityKind.LEGACY, legacy, fn)

    return Capability(CapabilityKind.ABSENT, current)


def resolve_start(component: Any) -> Capability:
    return _resolve(component, START_COMPONENT, LEGACY_START)


def resolve_stop(component: Any) -> Capability:
    return _resolve(component, STOP_COMPONENT, LEGACY_STOP)


def warn_if_legacy(name: str, capability: Capability) -> None:
    """Log a deprecation warning when a component still uses start/stop."""
    if capability.kind is not CapabilityKind.LEGACY:
        return
    current = START_COMPONENT if capability.hook == LEGACY_START else STOP_COMPONENT
    log.warn(
        f"{name}.{capability.hook} is deprecated, implement {name}.{current} instead",
        component=name,
    )
