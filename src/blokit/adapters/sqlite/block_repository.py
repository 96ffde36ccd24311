"""SQLite implementation of BlockRepository."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime

from blokit.adapters.sqlite.connection import execute_with_retry
from blokit.adapters.sqlite.utils import row_to_block
from blokit.models import Block, BlockCreate
from blokit.repositories import LIVE_DAYS_KEPT, BlockRepository
from blokit.utils.dates import local_day_bounds, to_iso
from blokit.utils.observable import LiveRegistry, LiveValue


class SqliteBlockRepository(BlockRepository):
    """SQLite implementation of the block store."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection
        self._live: LiveRegistry[list[Block]] = LiveRegistry(max_entries=LIVE_DAYS_KEPT)

    def _between(self, start: datetime, end: datetime) -> list[Block]:
        # started_at is stored as UTC ISO text, so string order is time order.
        cursor = self.connection.execute(
            """
            SELECT * FROM blocks
            WHERE started_at >= ? AND started_at < ?
            ORDER BY started_at ASC, id ASC
            """,
            (to_iso(start), to_iso(end)),
        )
        return [row_to_block(row) for row in cursor.fetchall()]

    async def insert(self, block_data: BlockCreate) -> Block:
        cursor = execute_with_retry(
            self.connection,
            "INSERT INTO blocks (started_at, finished_at) VALUES (?, ?)",
            (to_iso(block_data.started_at), to_iso(block_data.finished_at)),
        )
        self.connection.commit()
        row = self.connection.execute(
            "SELECT * FROM blocks WHERE id = ?", (cursor.lastrowid,)
        ).fetchone()
        block = row_to_block(row)
        self._live.notify()
        return block

    async def list_between(self, start: datetime, end: datetime) -> list[Block]:
        return self._between(start, end)

    def subscribe(self, day: date) -> LiveValue[list[Block]]:
        start, end = local_day_bounds(day)
        return self._live.get(day, lambda: self._between(start, end))
