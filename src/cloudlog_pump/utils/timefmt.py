"""Timestamp formatting helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def format_rfc3339(value: Optional[datetime]) -> str:
    """Render ``value`` as an RFC3339 timestamp with second precision.

    Naive datetimes are treated as UTC. ``None`` renders as the zero time
    (``0001-01-01T00:00:00Z``) so the output is always a valid timestamp.
    """

    if value is None:
        value = ZERO_TIME
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    stamp = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    return stamp + _format_offset(value.utcoffset())


def _format_offset(offset: Optional[timedelta]) -> str:
    if not offset:
        return "Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"
