"""Blokit domain models.

Pydantic models for the core entities: todos, recorded focus blocks, and
the timer/task state that flows between the session service and the
durable task runner.
"""

from .block import Block, BlockCreate
from .config_models import AppConfig
from .timer import (
    SessionStatus,
    StartOutcome,
    TaskProgress,
    TaskState,
    TimerSession,
)
from .todo import Todo, TodoCreate, TodoView

__all__ = [
    # Todo models
    "Todo",
    "TodoCreate",
    "TodoView",
    # Block models
    "Block",
    "BlockCreate",
    # Timer models
    "TaskProgress",
    "TaskState",
    "SessionStatus",
    "StartOutcome",
    "TimerSession",
    # Config models
    "AppConfig",
]
