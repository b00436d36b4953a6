"""
Pydantic snapshot of a running program, for health endpoints and debugging.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class LifecycleStatus(BaseModel):
    """Point-in-time view of the lifecycle controller."""
    phase: str = Field(
        ...,
        description="Current LifecyclePhase name (e.g. RUNNING, STOPPING)"
    )
    live: bool = Field(
        ...,
        description="Start dispatch has begun"
    )
    started: bool = Field(
        ...,
        description="Every dispatched start operation resolved successfully"
    )
    components: List[str] = Field(
        default_factory=list,
        description="Component names in start order"
    )
    stopped: List[str] = Field(
        default_factory=list,
        description="Components that already received their stop call"
    )
    pending_hooks: int = Field(
        0,
        description="Pre-stop hooks registered but not yet run"
    )
    shutdown_reason: Optional[str] = Field(
        None,
        description="SIGTERM / SIGINT / explicit / startup failure"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "phase": "RUNNING",
                "live": True,
                "started": True,
                "components": ["config", "database", "server"],
                "stopped": [],
                "pending_hooks": 1,
                "shutdown_reason": None,
            }
        }
    }
