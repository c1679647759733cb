"""
Date helpers shared by the storage backends
"""
from datetime import date, datetime, timedelta, timezone
from typing import Tuple


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (all stored timestamps are naive UTC)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def day_window(day: date) -> Tuple[datetime, datetime]:
    """Half-open [start, end) window covering a calendar day"""
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)
