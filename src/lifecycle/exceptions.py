"""
Exceptions raised by the lifecycle controller.

Start and stop failures are not wrapped: the component's own exception
propagates so callers can match on it directly.
"""


class LifecycleError(Exception):
    """Base class for errors raised by the lifecycle controller itself."""


class ConfigurationError(LifecycleError, ValueError):
    """
    The component registry (or a value handed to the program) is unusable.

    Raised before any start hook runs, e.g. when a registry entry is None, a falsy scalar ("", 0, False)
    or a coroutine/future the factory forgot to await. Empty containers are
    valid components.
    """
