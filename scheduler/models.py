"""
Models for the bot scheduler.

This module defines Pydantic models for:
- Scheduler configuration
- Per-cycle results
"""

from datetime import datetime, time, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class SchedulerConfig(BaseModel):
    """Configuration for the periodic cycle executor."""
    # Scheduling
    post_at: time = Field(default=time(12, 0), description="Daily delivery time, seconds ignored")
    timezone: str = Field(default="UTC", description="Timezone the delivery time is in")
    tick_interval_seconds: int = Field(default=60, ge=1, le=60, description="Seconds between cycles")

    # Error handling
    continue_on_error: bool = Field(
        default=False,
        description="Log a failed cycle and keep ticking instead of stopping"
    )


class CycleResult(BaseModel):
    """Result of one fetch, reconcile, deliver, persist cycle."""
    cycle_id: str = Field(..., description="Unique cycle identifier")
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    questions_loaded: int = Field(default=0)
    lines_fetched: int = Field(default=0)
    added: int = Field(default=0)
    updated: int = Field(default=0)
    unchanged: int = Field(default=0)

    delivery_due: bool = Field(default=False)
    delivered_question_id: Optional[UUID] = Field(default=None)

    questions_saved: int = Field(default=0)
    duration_seconds: float = Field(default=0.0)
