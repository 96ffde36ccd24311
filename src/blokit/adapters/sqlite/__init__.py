"""SQLite adapter for the local Blokit store."""

from .block_repository import SqliteBlockRepository
from .connection import open_connection
from .todo_repository import SqliteTodoRepository

__all__ = [
    "SqliteTodoRepository",
    "SqliteBlockRepository",
    "open_connection",
]
