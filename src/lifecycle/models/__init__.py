from .enums import (
    CapabilityKind,
    ExitCode,
    LifecyclePhase,
    LogCategory,
    LogLevel,
    RollbackScope,
    StartMode,
)
from .settings import LifecycleSettings
from .status import LifecycleStatus

__all__ = [
    "CapabilityKind",
    "ExitCode",
    "LifecyclePhase",
    "LogCategory",
    "LogLevel",
    "RollbackScope",
    "StartMode",
    "LifecycleSettings",
    "LifecycleStatus",
]
