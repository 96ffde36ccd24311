"""Repository interfaces for Blokit.

Abstract base classes that define the storage contracts (the "Ports").

Implementations (Adapters) are in:
- blokit.adapters.memory (in-process dictionaries)
- blokit.adapters.sqlite (local SQLite file)
"""

from .repository import (
    LIVE_DAYS_KEPT,
    BlockRepository,
    TodoQuery,
    TodoRepository,
    apply_todo_query,
)

__all__ = [
    "LIVE_DAYS_KEPT",
    "TodoRepository",
    "BlockRepository",
    "TodoQuery",
    "apply_todo_query",
]
