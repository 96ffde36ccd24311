"""Repository abstraction layer for Blokit.

This module defines the abstract base classes (interfaces) for the two
stores, following the Ports & Adapters pattern. Services depend only on
these contracts; the adapters package provides in-memory and SQLite
implementations.

Every store publishes live query results through ``LiveValue``. A mutation
is committed before the store re-runs its live queries, so subscribers never
observe a half-applied write.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from enum import Enum

from blokit.models import Block, BlockCreate, Todo, TodoCreate
from blokit.utils.dates import local_day_bounds
from blokit.utils.observable import LiveValue


# Per-day block queries kept live by a store before unwatched ones are dropped
LIVE_DAYS_KEPT = 7


class TodoQuery(str, Enum):
    """Live queries supported by every todo store."""

    INCOMPLETE = "incomplete"
    MARKED = "marked"
    ALL = "all"


def apply_todo_query(query: TodoQuery, todos: list[Todo]) -> list[Todo]:
    """Filter and order todos the way every store must answer ``query``.

    Incomplete and all views are in creation order; the marked view shows
    the most recently marked first.
    """
    if query == TodoQuery.ALL:
        return sorted(todos, key=lambda t: (t.created_at, t.id))
    incomplete = [t for t in todos if not t.completed]
    if query == TodoQuery.INCOMPLETE:
        return sorted(incomplete, key=lambda t: (t.created_at, t.id))
    marked = [t for t in incomplete if t.marked and t.marked_at is not None]
    return sorted(marked, key=lambda t: (t.marked_at, t.id), reverse=True)


class TodoRepository(ABC):
    """Abstract base class for todo persistence operations."""

    @abstractmethod
    async def insert(self, todo_data: TodoCreate) -> Todo:
        """Persist a new todo.

        Args:
            todo_data: TodoCreate with trimmed content and creation time

        Returns:
            The stored Todo with its assigned id
        """
        raise NotImplementedError("TodoRepository.insert() must be implemented by adapter")

    @abstractmethod
    async def update(self, todo: Todo) -> Todo:
        """Replace a stored todo with ``todo``.

        Raises:
            NotFoundError: If no todo has ``todo.id``
        """
        raise NotImplementedError("TodoRepository.update() must be implemented by adapter")

    @abstractmethod
    async def get(self, todo_id: int) -> Todo:
        """Get a todo by id.

        Raises:
            NotFoundError: If the todo does not exist
        """
        raise NotImplementedError("TodoRepository.get() must be implemented by adapter")

    @abstractmethod
    def subscribe(self, query: TodoQuery) -> LiveValue[list[Todo]]:
        """Return a live view of ``query``, re-published after every mutation."""
        raise NotImplementedError(
            "TodoRepository.subscribe() must be implemented by adapter"
        )


class BlockRepository(ABC):
    """Abstract base class for focus block persistence.

    Blocks are write-once: there is no update operation.
    """

    @abstractmethod
    async def insert(self, block_data: BlockCreate) -> Block:
        """Persist a finished block and return it with its id."""
        raise NotImplementedError(
            "BlockRepository.insert() must be implemented by adapter"
        )

    @abstractmethod
    async def list_between(self, start: datetime, end: datetime) -> list[Block]:
        """List blocks with ``start <= started_at < end``, oldest first."""
        raise NotImplementedError(
            "BlockRepository.list_between() must be implemented by adapter"
        )

    @abstractmethod
    def subscribe(self, day: date) -> LiveValue[list[Block]]:
        """Return a live view of the blocks started on a local calendar day."""
        raise NotImplementedError(
            "BlockRepository.subscribe() must be implemented by adapter"
        )

    async def list_for_day(self, day: date) -> list[Block]:
        start, end = local_day_bounds(day)
        return await self.list_between(start, end)
