"""Utility functions for the SQLite adapter."""

from __future__ import annotations

import sqlite3
from typing import Any

from blokit.models import Block, Todo
from blokit.utils.dates import parse_iso


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary.

    Args:
        row: sqlite3.Row object

    Returns:
        Dictionary with column names as keys
    """
    if row is None:
        return {}
    return dict(row)


def row_to_todo(row: sqlite3.Row) -> Todo:
    data = row_to_dict(row)
    return Todo(
        id=data["id"],
        content=data["content"],
        completed=bool(data["completed"]),
        marked=bool(data["marked"]),
        created_at=parse_iso(data["created_at"]),
        marked_at=parse_iso(data["marked_at"]),
        completed_at=parse_iso(data["completed_at"]),
    )


def row_to_block(row: sqlite3.Row) -> Block:
    data = row_to_dict(row)
    return Block(
        id=data["id"],
        started_at=parse_iso(data["started_at"]),
        finished_at=parse_iso(data["finished_at"]),
    )
