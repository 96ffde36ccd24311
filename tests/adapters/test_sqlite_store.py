"""SQLite-specific tests: connection setup, migrations and persistence."""

from __future__ import annotations

import sqlite3
import stat
from datetime import UTC, datetime

import pytest

from blokit.adapters.sqlite import SqliteTodoRepository, open_connection
from blokit.adapters.sqlite import schema as db_schema
from blokit.adapters.sqlite.migrations import ALL_MIGRATIONS
from blokit.adapters.sqlite.migrations.runner import Migration, MigrationRunner
from blokit.exceptions import MigrationError
from blokit.models import TodoCreate
from blokit.repositories import TodoQuery


def test_open_connection_applies_all_migrations(tmp_path):
    conn = open_connection(tmp_path / "blokit.db")

    runner = MigrationRunner(conn)
    assert runner.get_current_version() == db_schema.SCHEMA_VERSION
    history = runner.get_migration_history()
    assert [h["version"] for h in history] == [m.version for m in ALL_MIGRATIONS]

    tables = {
        row[0]
        for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    }
    assert {"todos", "blocks", "schema_version"} <= tables
    conn.close()


def test_reopen_does_not_rerun_migrations(tmp_path):
    path = tmp_path / "blokit.db"
    open_connection(path).close()

    conn = open_connection(path)
    assert MigrationRunner(conn).run_migrations(ALL_MIGRATIONS) == 0
    assert len(MigrationRunner(conn).get_migration_history()) == len(ALL_MIGRATIONS)
    conn.close()


def test_new_database_file_is_private(tmp_path):
    path = tmp_path / "nested" / "blokit.db"
    open_connection(path).close()

    assert path.exists()
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_memory_database_is_supported():
    conn = open_connection(":memory:")
    assert MigrationRunner(conn).get_current_version() == db_schema.SCHEMA_VERSION
    conn.close()


def test_failed_migration_rolls_back():
    conn = sqlite3.connect(":memory:")

    class Broken(Migration):
        version = 1
        description = "broken"

        def up(self, connection):
            connection.execute("CREATE TABLE ok (id INTEGER)")
            connection.execute("THIS IS NOT SQL")

    runner = MigrationRunner(conn)
    with pytest.raises(MigrationError):
        runner.run_migration(Broken())
    assert runner.get_current_version() == 0


def test_migration_version_must_increase():
    conn = open_connection(":memory:")
    with pytest.raises(ValueError):
        MigrationRunner(conn).run_migration(ALL_MIGRATIONS[0])
    conn.close()


def test_blank_content_rejected_by_schema():
    conn = open_connection(":memory:")
    with pytest.raises(sqlite3.IntegrityError):
        conn.execute(
            "INSERT INTO todos (content, created_at) VALUES ('   ', '2024-01-01')"
        )
    conn.close()


@pytest.mark.asyncio
async def test_todos_survive_reopen(tmp_path):
    path = tmp_path / "blokit.db"
    conn = open_connection(path)
    repo = SqliteTodoRepository(conn)
    created = await repo.insert(
        TodoCreate(content="persist me", created_at=datetime(2024, 1, 1, tzinfo=UTC))
    )
    conn.close()

    conn = open_connection(path)
    repo = SqliteTodoRepository(conn)
    assert repo.subscribe(TodoQuery.ALL).value == [created]
    conn.close()
