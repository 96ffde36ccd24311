"""Timer and durable task state models."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TaskState(str, Enum):
    """Execution state of a durable countdown task."""

    PENDING = "pending"
    RUNNING = "running"
    FINISHED = "finished"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.FINISHED, TaskState.CANCELLED)


class TaskProgress(BaseModel):
    """One progress report published by a durable task runner."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    tag: str
    duration_seconds: int = Field(ge=0)
    remaining_seconds: int = Field(ge=0)
    state: TaskState
    # Set on finished reports; the persisted deadline for countdowns that
    # ran out while no process was watching.
    finished_at: datetime | None = None


class SessionStatus(str, Enum):
    """Lifecycle of the focus block timer."""

    IDLE = "idle"
    AWAITING_PERMISSION = "awaiting_permission"
    RUNNING = "running"
    COMPLETING = "completing"
    CANCELLED = "cancelled"


class StartOutcome(str, Enum):
    """Result of asking the session service to start a countdown."""

    STARTED = "started"
    CAPABILITY_DENIED = "capability_denied"


class TimerSession(BaseModel):
    """Snapshot of the single focus block timer.

    Attributes:
        task_id: Durable task backing the countdown, None while idle
        total_duration: Configured countdown length
        remaining: Time left; never increases while running
        status: Current lifecycle state
    """

    model_config = ConfigDict(frozen=True)

    task_id: str | None = None
    total_duration: timedelta = timedelta(0)
    remaining: timedelta = timedelta(0)
    status: SessionStatus = SessionStatus.IDLE

    @property
    def is_running(self) -> bool:
        return self.status == SessionStatus.RUNNING

    @classmethod
    def idle(cls) -> TimerSession:
        return cls()
