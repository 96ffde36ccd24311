"""SQLite implementation of TodoRepository."""

from __future__ import annotations

import sqlite3

from blokit.adapters.sqlite.connection import execute_with_retry
from blokit.adapters.sqlite.utils import row_to_todo
from blokit.exceptions import NotFoundError
from blokit.models import Todo, TodoCreate
from blokit.repositories import TodoQuery, TodoRepository
from blokit.utils.dates import to_iso
from blokit.utils.observable import LiveRegistry, LiveValue

_QUERIES = {
    TodoQuery.INCOMPLETE: (
        "SELECT * FROM todos WHERE completed = 0 ORDER BY created_at ASC, id ASC"
    ),
    TodoQuery.MARKED: (
        "SELECT * FROM todos WHERE completed = 0 AND marked = 1 "
        "ORDER BY marked_at DESC, id DESC"
    ),
    TodoQuery.ALL: "SELECT * FROM todos ORDER BY created_at ASC, id ASC",
}


class SqliteTodoRepository(TodoRepository):
    """SQLite implementation of the todo store."""

    def __init__(self, connection: sqlite3.Connection):
        """Initialize the repository.

        Args:
            connection: Connection returned by ``open_connection``
        """
        self.connection = connection
        self._live: LiveRegistry[list[Todo]] = LiveRegistry()

    def _fetch(self, query: TodoQuery) -> list[Todo]:
        cursor = self.connection.execute(_QUERIES[query])
        return [row_to_todo(row) for row in cursor.fetchall()]

    def _fetch_one(self, todo_id: int) -> Todo:
        cursor = self.connection.execute("SELECT * FROM todos WHERE id = ?", (todo_id,))
        row = cursor.fetchone()
        if not row:
            raise NotFoundError("Todo", todo_id)
        return row_to_todo(row)

    async def insert(self, todo_data: TodoCreate) -> Todo:
        cursor = execute_with_retry(
            self.connection,
            """
            INSERT INTO todos (content, completed, marked, created_at)
            VALUES (?, 0, 0, ?)
            """,
            (todo_data.content, to_iso(todo_data.created_at)),
        )
        self.connection.commit()
        todo = self._fetch_one(cursor.lastrowid)
        self._live.notify()
        return todo

    async def update(self, todo: Todo) -> Todo:
        cursor = execute_with_retry(
            self.connection,
            """
            UPDATE todos
            SET content = ?, completed = ?, marked = ?,
                marked_at = ?, completed_at = ?
            WHERE id = ?
            """,
            (
                todo.content,
                int(todo.completed),
                int(todo.marked),
                to_iso(todo.marked_at),
                to_iso(todo.completed_at),
                todo.id,
            ),
        )
        if cursor.rowcount == 0:
            self.connection.rollback()
            raise NotFoundError("Todo", todo.id)
        self.connection.commit()
        self._live.notify()
        return todo

    async def get(self, todo_id: int) -> Todo:
        return self._fetch_one(todo_id)

    def subscribe(self, query: TodoQuery) -> LiveValue[list[Todo]]:
        query = TodoQuery(query)
        return self._live.get(query, lambda: self._fetch(query))
