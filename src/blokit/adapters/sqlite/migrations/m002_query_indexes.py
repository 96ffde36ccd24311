"""Indexes for the incomplete, marked and per-day block queries."""

import sqlite3

from blokit.adapters.sqlite import schema

from .runner import Migration


class QueryIndexesMigration(Migration):
    """Migration 002: Add indexes used by live queries."""

    @property
    def version(self) -> int:
        return 2

    @property
    def description(self) -> str:
        return "Indexes for live todo and block queries"

    def up(self, connection: sqlite3.Connection) -> None:
        for index_sql in schema.ALL_INDEXES:
            connection.execute(index_sql)


query_indexes_migration = QueryIndexesMigration()
