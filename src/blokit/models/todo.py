"""Todo data models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TodoView(str, Enum):
    """Which slice of the todo list a reader is looking at."""

    INCOMPLETE = "incomplete"
    MARKED = "marked"
    ALL = "all"


class Todo(BaseModel):
    """Todo model representing a stored task item.

    Attributes:
        id: Store-assigned identifier (auto-increment)
        content: Trimmed, non-empty text
        completed: Completion status
        marked: Priority ("starred") flag
        created_at: Creation timestamp
        marked_at: When the todo was last marked, None while unmarked
        completed_at: When the todo was completed, None while incomplete
    """

    model_config = ConfigDict(frozen=True)

    id: int
    content: str = Field(min_length=1)
    completed: bool = False
    marked: bool = False
    created_at: datetime
    marked_at: datetime | None = None
    completed_at: datetime | None = None

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty")
        return v

    @model_validator(mode="after")
    def check_timestamps(self) -> Todo:
        if self.marked != (self.marked_at is not None):
            raise ValueError("marked_at must be set exactly when marked is true")
        if self.completed != (self.completed_at is not None):
            raise ValueError("completed_at must be set exactly when completed is true")
        return self


class TodoCreate(BaseModel):
    """Model for creating a new todo.

    Attributes:
        content: Todo text (required, trimmed by the service)
        created_at: Creation timestamp supplied by the service clock
    """

    content: str = Field(min_length=1)
    created_at: datetime
