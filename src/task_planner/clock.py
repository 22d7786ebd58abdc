from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    return datetime.now()


def fixed_clock(instant: datetime) -> Clock:
    """Return a clock that always reports ``instant`` (useful for reproducible plans)."""

    def _now() -> datetime:
        return instant

    return _now


def _align(now: datetime, other: datetime) -> datetime:
    # Comparing aware and naive datetimes raises; treat naive values as local time.
    if other.tzinfo is not None and now.tzinfo is None:
        return now.astimezone()
    if other.tzinfo is None and now.tzinfo is not None:
        return now.replace(tzinfo=None)
    return now


def hours_until(deadline: datetime, now: datetime) -> float:
    """Hours from ``now`` until ``deadline`` (negative once the deadline has passed)."""
    now = _align(now, deadline)
    return (deadline - now).total_seconds() / 3600.0


def is_past(deadline: datetime, now: datetime) -> bool:
    return deadline < _align(now, deadline)


def end_of_workday(now: datetime, days_ahead: int = 0, hour: int = 17) -> datetime:
    """17:00 on the day ``days_ahead`` after ``now``, keeping its tzinfo."""
    day = now + timedelta(days=days_ahead)
    return day.replace(hour=hour, minute=0, second=0, microsecond=0)
