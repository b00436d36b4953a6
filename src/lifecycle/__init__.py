"""
Lifecycle subsystem
-------------------

Exports the public API for:
- building a frozen component registry
- starting components in order, with rollback on failure
- graceful, idempotent shutdown on SIGTERM/SIGINT or explicit stop()

Internal modules remain private. External code should import from:
    from lifecycle import run, ProgramConfig, Program
    from lifecycle import START_COMPONENT, STOP_COMPONENT
"""

from .component_protocol import START_COMPONENT, STOP_COMPONENT, IBaseComponent, IStartOptions
from .config_manager import ConfigManager, load_settings
from .entry import ProgramConfig, run, serve, start_program
from .exceptions import ConfigurationError, LifecycleError
from .models import ExitCode, LifecyclePhase, LifecycleSettings, LifecycleStatus, RollbackScope, StartMode
from .program import Program
from .registry import ComponentRegistry

__all__ = [
    "START_COMPONENT",
    "STOP_COMPONENT",
    "IBaseComponent",
    "IStartOptions",
    "ConfigManager",
    "load_settings",
    "ProgramConfig",
    "run",
    "serve",
    "start_program",
    "ConfigurationError",
    "LifecycleError",
    "ExitCode",
    "LifecyclePhase",
    "LifecycleSettings",
    "LifecycleStatus",
    "RollbackScope",
    "StartMode",
    "Program",
    "ComponentRegistry",
]
