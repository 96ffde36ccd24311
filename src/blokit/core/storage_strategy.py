"""
Strategy Pattern: Storage Strategy Container

A strategy bundles the todo and block repositories of one storage backend.
The application picks one strategy at startup and injects its repositories
into the services; services never know which backend they are using.
"""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

from blokit.repositories import BlockRepository, TodoRepository


class StorageStrategy(ABC):
    """Abstract base class for storage strategies."""

    @abstractmethod
    def get_todo_repository(self) -> TodoRepository:
        """Get todo repository implementation for this strategy."""

    @abstractmethod
    def get_block_repository(self) -> BlockRepository:
        """Get block repository implementation for this strategy."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""

    def close(self) -> None:
        """Release any resources held by the backend."""


class SqliteStorageStrategy(StorageStrategy):
    """Local SQLite storage strategy: both repositories share one connection."""

    def __init__(self, db_path: str | Path):
        """
        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        # Import here to keep the sqlite adapter optional for memory-only use
        from blokit.adapters.sqlite import (
            SqliteBlockRepository,
            SqliteTodoRepository,
            open_connection,
        )

        self.db_path = str(db_path)
        self.connection: sqlite3.Connection | None = open_connection(db_path)
        self._todo_repo = SqliteTodoRepository(self.connection)
        self._block_repo = SqliteBlockRepository(self.connection)

    def get_todo_repository(self) -> TodoRepository:
        return self._todo_repo

    def get_block_repository(self) -> BlockRepository:
        return self._block_repo

    @property
    def storage_type(self) -> str:
        return "sqlite"

    def close(self) -> None:
        if self.connection is not None:
            self.connection.commit()
            self.connection.close()
            self.connection = None


class MemoryStorageStrategy(StorageStrategy):
    """In-process storage strategy; nothing survives the process."""

    def __init__(self) -> None:
        from blokit.adapters.memory import (
            InMemoryBlockRepository,
            InMemoryTodoRepository,
        )

        self._todo_repo = InMemoryTodoRepository()
        self._block_repo = InMemoryBlockRepository()

    def get_todo_repository(self) -> TodoRepository:
        return self._todo_repo

    def get_block_repository(self) -> BlockRepository:
        return self._block_repo

    @property
    def storage_type(self) -> str:
        return "memory"
