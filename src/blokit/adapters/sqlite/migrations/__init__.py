"""Database migrations for the local SQLite store."""

from .m001_initial_schema import initial_migration
from .m002_query_indexes import query_indexes_migration
from .runner import Migration, MigrationRunner

ALL_MIGRATIONS: list[Migration] = [
    initial_migration,
    query_indexes_migration,
]

__all__ = ["ALL_MIGRATIONS", "Migration", "MigrationRunner"]
