"""
Component protocol for lifecycle-managed objects.

Any object can be registered as a component. Those that own resources
implement one or both hooks under the names held by START_COMPONENT and
STOP_COMPONENT. Plain ``start`` / ``stop`` methods are still honoured but log
a deprecation warning.
"""

from typing import Any, Awaitable, Mapping, Optional, Protocol, Union

START_COMPONENT = "__start_component__"
STOP_COMPONENT = "__stop_component__"

LEGACY_START = "start"
LEGACY_STOP = "stop"

MaybeAwaitable = Union[Awaitable[Any], Any]


class IStartOptions(Protocol):
    """Read-only view handed to every start hook."""

    def started(self) -> bool:
        """Whether every component finished starting."""
        ...

    def live(self) -> bool:
        """Whether the start sequence has begun."""
        ...

    def get_components(self) -> Mapping[str, Any]:
        """All registered components, for late-bound wiring between them."""
        ...


class IBaseComponent(Protocol):
    """
    Protocol for components that take part in the lifecycle.

    Both hooks are optional; either may be sync or async.

    Example:
        class Database:
            async def __start_component__(self, options) -> None:
                self.pool = await create_pool(...)

            async def __stop_component__(self) -> None:
                await self.pool.close()
    """

    def __start_component__(self, options: IStartOptions) -> Optional[MaybeAwaitable]:
        """
        Connect, bind ports, spawn background work.
        """
        ...

    def __stop_component__(self) -> Optional[MaybeAwaitable]:
        """
        Finish pending work and release resources.
        """
        ...
