"""Database schema definitions for the local SQLite store.

Timestamps are stored as ISO 8601 text in UTC. Booleans are stored as 0/1.
"""

from __future__ import annotations

# Schema version tracking
SCHEMA_VERSION = 2

# Todos table
CREATE_TODOS_TABLE = """
CREATE TABLE IF NOT EXISTS todos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    content TEXT NOT NULL CHECK (length(trim(content)) > 0),
    completed BOOLEAN NOT NULL DEFAULT 0,
    marked BOOLEAN NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL,
    marked_at DATETIME,
    completed_at DATETIME
)
"""

# Blocks table - finished focus sessions, write-once
CREATE_BLOCKS_TABLE = """
CREATE TABLE IF NOT EXISTS blocks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    started_at DATETIME NOT NULL,
    finished_at DATETIME NOT NULL,
    CHECK (started_at < finished_at)
)
"""

ALL_TABLES = [
    CREATE_TODOS_TABLE,
    CREATE_BLOCKS_TABLE,
]

# Indexes backing the live queries
CREATE_TODOS_COMPLETED_INDEX = """
CREATE INDEX IF NOT EXISTS idx_todos_completed
ON todos(completed, created_at)
"""

CREATE_TODOS_MARKED_INDEX = """
CREATE INDEX IF NOT EXISTS idx_todos_marked
ON todos(completed, marked, marked_at)
"""

CREATE_BLOCKS_STARTED_INDEX = """
CREATE INDEX IF NOT EXISTS idx_blocks_started_at
ON blocks(started_at)
"""

ALL_INDEXES = [
    CREATE_TODOS_COMPLETED_INDEX,
    CREATE_TODOS_MARKED_INDEX,
    CREATE_BLOCKS_STARTED_INDEX,
]
