"""Timestamp helpers shared by the models, stores and services."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, time, timedelta

Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def to_iso(value: datetime | None) -> str | None:
    """Serialize a datetime as ISO 8601, normalizing naive values to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO 8601 string back into an aware datetime."""
    if value is None:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return the [start, end) UTC interval covering a local calendar day."""
    # Each midnight takes the offset in force on its own date, so days
    # spanning a DST change are 23 or 25 hours long.
    start = datetime.combine(day, time.min).astimezone()
    end = datetime.combine(day + timedelta(days=1), time.min).astimezone()
    return start.astimezone(UTC), end.astimezone(UTC)


def format_clock(seconds: int) -> str:
    """Render a second count as MM:SS (or H:MM:SS past an hour)."""
    seconds = max(0, int(seconds))
    hours, rem = divmod(seconds, 3600)
    mins, secs = divmod(rem, 60)
    if hours:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins:02d}:{secs:02d}"
