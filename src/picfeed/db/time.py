# src/picfeed/db/time.py
"""Time utilities for database models.

Timestamps are stored as naive UTC values so that comparisons behave the same
on SQLite and server databases.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


def as_db_time(value: datetime) -> datetime:
    """Normalise ``value`` to the naive UTC representation used in storage."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)
