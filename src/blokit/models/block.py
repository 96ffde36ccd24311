"""Block data models."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, model_validator


class Block(BaseModel):
    """A recorded focus session. Immutable once stored."""

    model_config = ConfigDict(frozen=True)

    id: int
    started_at: datetime
    finished_at: datetime

    @model_validator(mode="after")
    def check_order(self) -> Block:
        if self.started_at >= self.finished_at:
            raise ValueError("started_at must be before finished_at")
        return self

    @property
    def duration(self) -> timedelta:
        return self.finished_at - self.started_at


class BlockCreate(BaseModel):
    """Model for recording a finished countdown."""

    started_at: datetime
    finished_at: datetime

    @model_validator(mode="after")
    def check_order(self) -> BlockCreate:
        if self.started_at >= self.finished_at:
            raise ValueError("started_at must be before finished_at")
        return self
