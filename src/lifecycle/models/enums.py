"""
Enums for the component lifecycle state machine and logging
"""

from enum import Enum, auto


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Settings loading, validation
    SYSTEM = auto()      # Entry point, fatal errors
    LIFECYCLE = auto()   # Start sequence, phase changes
    COMPONENT = auto()   # Per-component hook dispatch
    SHUTDOWN = auto()    # Pre-stop hooks, component stop
    SIGNAL = auto()      # OS signal listeners

    GENERAL = auto()    # Default general category


class LifecyclePhase(Enum):
    """
    Program lifecycle phases

    CONSTRUCTING → WIRING → STARTING → RUNNING → STOPPING → TERMINATED
                                     ↘ START_FAILED ↗
    """
    CONSTRUCTING = auto()
    WIRING = auto()
    STARTING = auto()
    RUNNING = auto()
    START_FAILED = auto()
    STOPPING = auto()
    TERMINATED = auto()


class StartMode(Enum):
    """How pending start operations are awaited during dispatch"""
    SEQUENTIAL = "sequential"   # await each pending start before the next dispatch
    CONCURRENT = "concurrent"   # dispatch everything, then join; rollback stops each component once its own start settled


class RollbackScope(Enum):
    """Which components receive a stop call when startup fails"""
    PENDING = "pending"         # only components whose start returned an awaitable
    DISPATCHED = "dispatched"   # every component whose start hook was called


class CapabilityKind(Enum):
    """Which hook convention a component exposes"""
    CURRENT = auto()
    LEGACY = auto()
    ABSENT = auto()


class ExitCode(int, Enum):
    """Process exit statuses used by run()"""
    OK = 0
    FAILURE = 1
    SHUTDOWN_FAILURE = 2
    INTERRUPTED = 130
