"""Countdown state persistence.

Each running countdown is written to ``countdown_<tag>.json`` in the state
directory when it is scheduled and removed when it finishes or is cancelled.
A file left behind means the owning process died mid-countdown; the runner
picks it up again on ``resume``.
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from pathlib import Path

from blokit.utils.dates import parse_iso, to_iso
from blokit.utils.logger import get_logger

logger = get_logger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


@dataclass
class CountdownRecord:
    """A scheduled countdown as persisted on disk."""

    task_id: str
    tag: str
    duration_seconds: int
    started_at: str  # ISO 8601
    deadline: str  # ISO 8601

    @property
    def deadline_datetime(self) -> datetime:
        return parse_iso(self.deadline)

    def remaining_at(self, now: datetime) -> int:
        """Whole seconds left at ``now``, rounded up, never negative."""
        left = (self.deadline_datetime - now).total_seconds()
        if left <= 0:
            return 0
        whole = int(left)
        return min(self.duration_seconds, whole if whole == left else whole + 1)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> CountdownRecord:
        return cls(**data)

    @classmethod
    def create(
        cls, task_id: str, tag: str, duration_seconds: int, now: datetime
    ) -> CountdownRecord:
        return cls(
            task_id=task_id,
            tag=tag,
            duration_seconds=duration_seconds,
            started_at=to_iso(now),
            deadline=to_iso(now + timedelta(seconds=duration_seconds)),
        )


class CountdownStateStore:
    """Reads and writes countdown records in a state directory."""

    def __init__(self, state_dir: Path):
        self.state_dir = Path(state_dir)
        self.state_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, tag: str) -> Path:
        return self.state_dir / f"countdown_{_UNSAFE.sub('_', tag)}.json"

    def save(self, record: CountdownRecord) -> None:
        path = self.path_for(record.tag)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(record.to_dict(), f, indent=2)
        path.chmod(0o600)

    def load(self, tag: str) -> CountdownRecord | None:
        """Load the record for ``tag``. Returns None if missing or unreadable."""
        path = self.path_for(tag)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return CountdownRecord.from_dict(json.load(f))
        except (json.JSONDecodeError, TypeError, KeyError, ValueError):
            logger.warning("discarding unreadable countdown state %s", path)
            path.unlink(missing_ok=True)
            return None

    def delete(self, tag: str, task_id: str | None = None) -> None:
        """Delete the record for ``tag``, only if it belongs to ``task_id`` when given."""
        if task_id is not None:
            record = self.load(tag)
            if record is None or record.task_id != task_id:
                return
        self.path_for(tag).unlink(missing_ok=True)
