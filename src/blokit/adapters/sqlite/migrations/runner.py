"""Migration framework for SQLite database schema evolution.

This module provides a simple migration system with:
- Sequential version-based migrations
- Forward-only migration support
- Migration tracking in a schema_version table
- Automatic execution when a connection is opened
"""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod

from blokit.exceptions import MigrationError
from blokit.utils.dates import now_utc
from blokit.utils.logger import get_logger

logger = get_logger(__name__)


class Migration(ABC):
    """Base class for database migrations."""

    @property
    @abstractmethod
    def version(self) -> int:
        """Migration version number (sequential)."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of the migration."""

    @abstractmethod
    def up(self, connection: sqlite3.Connection) -> None:
        """Execute forward migration.

        Args:
            connection: Database connection
        """


class MigrationRunner:
    """Manages and executes database migrations."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection
        self._ensure_version_table()

    def _ensure_version_table(self) -> None:
        """Create schema_version table if it doesn't exist."""
        self.connection.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                description TEXT NOT NULL,
                applied_at DATETIME NOT NULL
            )
        """)
        self.connection.commit()

    def get_current_version(self) -> int:
        """Get current database schema version.

        Returns:
            Current version number (0 if no migrations applied)
        """
        cursor = self.connection.execute("SELECT MAX(version) FROM schema_version")
        result = cursor.fetchone()[0]
        return result if result is not None else 0

    def run_migration(self, migration: Migration) -> None:
        """Run a single migration inside a transaction.

        Raises:
            ValueError: If migration version is not greater than current version
            MigrationError: If the migration itself fails
        """
        current_version = self.get_current_version()

        if migration.version <= current_version:
            raise ValueError(
                f"Migration version {migration.version} is not greater than "
                f"current version {current_version}"
            )

        try:
            migration.up(self.connection)
            self.connection.execute(
                """
                INSERT INTO schema_version (version, description, applied_at)
                VALUES (?, ?, ?)
                """,
                (migration.version, migration.description, now_utc().isoformat()),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            self.connection.rollback()
            raise MigrationError(f"Migration {migration.version} failed: {e}") from e

        logger.info(
            "applied migration %d: %s", migration.version, migration.description
        )

    def run_migrations(self, migrations: list[Migration]) -> int:
        """Run all pending migrations.

        Returns:
            Number of migrations applied
        """
        current_version = self.get_current_version()
        pending = [
            m for m in sorted(migrations, key=lambda m: m.version)
            if m.version > current_version
        ]
        for migration in pending:
            self.run_migration(migration)
        return len(pending)

    def get_migration_history(self) -> list[dict]:
        """Get history of applied migrations."""
        cursor = self.connection.execute("""
            SELECT version, description, applied_at
            FROM schema_version
            ORDER BY version
            """)

        return [
            {"version": row[0], "description": row[1], "applied_at": row[2]}
            for row in cursor.fetchall()
        ]
