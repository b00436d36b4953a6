"""
Lifecycle settings - Pydantic model for the controller configuration

Loaded from YAML by ConfigManager or passed directly through ProgramConfig.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from lifecycle.models.enums import LogLevel, RollbackScope, StartMode


class LifecycleSettings(BaseModel):
    """Tunable behaviour of the start sequencer, shutdown path and logger."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    log_level: Literal["DEBUG", "INFO", "WARN", "ERROR"] = Field(
        "INFO",
        description="Minimum level written to stderr"
    )
    use_colors: Optional[bool] = Field(
        None,
        description="ANSI colors on/off; null means only when stderr is a TTY"
    )
    start_mode: StartMode = Field(
        StartMode.SEQUENTIAL,
        description="sequential: await each pending start before dispatching the next; "
                    "concurrent: dispatch all, then join"
    )
    rollback_scope: RollbackScope = Field(
        RollbackScope.PENDING,
        description="pending: stop only components whose start returned an awaitable; "
                    "dispatched: also stop components that started synchronously"
    )

    @property
    def level(self) -> LogLevel:
        return LogLevel[self.log_level]
