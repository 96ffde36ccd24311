"""Database connection management for the local SQLite store.

Connections are created explicitly and handed to the repositories that use
them; there is no process-wide database instance.
"""

from __future__ import annotations

import os
import sqlite3
import time
from pathlib import Path

from blokit.adapters.sqlite.migrations import ALL_MIGRATIONS
from blokit.adapters.sqlite.migrations.runner import MigrationRunner
from blokit.utils.logger import get_logger

logger = get_logger(__name__)

MEMORY_DB = ":memory:"


def open_connection(db_path: str | Path) -> sqlite3.Connection:
    """Open a configured connection and bring its schema up to date.

    - Rows are returned as ``sqlite3.Row``
    - Foreign keys are enforced
    - File databases use WAL mode and owner-only permissions

    Args:
        db_path: Path to the database file, or ":memory:"

    Returns:
        sqlite3.Connection ready for the repositories
    """
    in_memory = str(db_path) == MEMORY_DB
    is_new_database = False
    if not in_memory:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

    connection = sqlite3.connect(
        str(db_path),
        check_same_thread=False,
        timeout=30.0,
    )
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    if not in_memory:
        connection.execute("PRAGMA journal_mode = WAL")

    if is_new_database:
        os.chmod(db_path, 0o600)

    applied = MigrationRunner(connection).run_migrations(ALL_MIGRATIONS)
    if applied:
        logger.info("database %s migrated (%d migrations)", db_path, applied)

    return connection


def execute_with_retry(
    connection: sqlite3.Connection,
    sql: str,
    params: tuple | dict | None = None,
    max_retries: int = 3,
) -> sqlite3.Cursor:
    """Execute SQL with retry logic for database locked errors.

    Raises:
        sqlite3.OperationalError: If database remains locked after retries
    """
    for attempt in range(max_retries):
        try:
            if params:
                return connection.execute(sql, params)
            return connection.execute(sql)
        except sqlite3.OperationalError as e:
            if "database is locked" in str(e) and attempt < max_retries - 1:
                # Exponential backoff: 0.1s, 0.2s, 0.4s
                time.sleep(0.1 * (2**attempt))
                continue
            raise

    raise sqlite3.OperationalError("Max retries exceeded")
