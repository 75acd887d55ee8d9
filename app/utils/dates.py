"""
Datetime helpers. Everything is stored as naive UTC so MySQL and SQLite
compare the same way.
"""

import math
from datetime import datetime, timezone

SECONDS_PER_DAY = 24 * 60 * 60


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def ceil_days(start: datetime, end: datetime) -> int:
    """Whole days from start to end, rounded up (negative when end is earlier)."""
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)
