"""In-memory implementation of the todo and block repositories.

Useful as an embedded store for tests and for running the services without
a database file. Ids are assigned from a per-store counter, the way an
auto-increment column would.
"""

from __future__ import annotations

import itertools
from datetime import date, datetime

from blokit.exceptions import NotFoundError
from blokit.models import Block, BlockCreate, Todo, TodoCreate
from blokit.repositories import (
    LIVE_DAYS_KEPT,
    BlockRepository,
    TodoQuery,
    TodoRepository,
    apply_todo_query,
)
from blokit.utils.dates import local_day_bounds
from blokit.utils.observable import LiveRegistry, LiveValue


class InMemoryTodoRepository(TodoRepository):
    """Dictionary-backed todo store."""

    def __init__(self) -> None:
        self._todos: dict[int, Todo] = {}
        self._ids = itertools.count(1)
        self._live: LiveRegistry[list[Todo]] = LiveRegistry()

    async def insert(self, todo_data: TodoCreate) -> Todo:
        todo = Todo(
            id=next(self._ids),
            content=todo_data.content,
            created_at=todo_data.created_at,
        )
        self._todos[todo.id] = todo
        self._live.notify()
        return todo

    async def update(self, todo: Todo) -> Todo:
        if todo.id not in self._todos:
            raise NotFoundError("Todo", todo.id)
        self._todos[todo.id] = todo
        self._live.notify()
        return todo

    async def get(self, todo_id: int) -> Todo:
        try:
            return self._todos[todo_id]
        except KeyError:
            raise NotFoundError("Todo", todo_id) from None

    def subscribe(self, query: TodoQuery) -> LiveValue[list[Todo]]:
        query = TodoQuery(query)
        return self._live.get(
            query, lambda: apply_todo_query(query, list(self._todos.values()))
        )


class InMemoryBlockRepository(BlockRepository):
    """List-backed block store."""

    def __init__(self) -> None:
        self._blocks: list[Block] = []
        self._ids = itertools.count(1)
        self._live: LiveRegistry[list[Block]] = LiveRegistry(max_entries=LIVE_DAYS_KEPT)

    async def insert(self, block_data: BlockCreate) -> Block:
        block = Block(
            id=next(self._ids),
            started_at=block_data.started_at,
            finished_at=block_data.finished_at,
        )
        self._blocks.append(block)
        self._live.notify()
        return block

    def _between(self, start: datetime, end: datetime) -> list[Block]:
        found = [b for b in self._blocks if start <= b.started_at < end]
        return sorted(found, key=lambda b: (b.started_at, b.id))

    async def list_between(self, start: datetime, end: datetime) -> list[Block]:
        return self._between(start, end)

    def subscribe(self, day: date) -> LiveValue[list[Block]]:
        start, end = local_day_bounds(day)
        return self._live.get(day, lambda: self._between(start, end))
