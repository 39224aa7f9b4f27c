"""Calendar window helpers used to bucket records by week and month.

All comparisons happen in local wall-clock time: timezone-aware values are
converted to the system timezone and naive values are taken as local already.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Tuple

MONDAY = 0
SUNDAY = 6

# Smallest step datetime can represent; a month ends one tick before the next begins.
RESOLUTION = timedelta(microseconds=1)


def to_local(dt: datetime) -> datetime:
    """Return ``dt`` as a naive local wall-clock datetime."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def week_start_date(day: date, week_start: int = MONDAY) -> date:
    """First day of the calendar week containing ``day``."""
    if not MONDAY <= week_start <= SUNDAY:
        raise ValueError(f"week_start must be between 0 and 6, got {week_start}")
    offset = (day.weekday() - week_start) % 7
    return day - timedelta(days=offset)


def is_in_current_week(timestamp: datetime, now: datetime, week_start: int = MONDAY) -> bool:
    ts_day = to_local(timestamp).date()
    start = week_start_date(to_local(now).date(), week_start)
    return start <= ts_day < start + timedelta(days=7)


def is_in_current_month(timestamp: datetime, now: datetime) -> bool:
    ts, current = to_local(timestamp), to_local(now)
    return (ts.year, ts.month) == (current.year, current.month)


def is_same_day(timestamp: datetime, now: datetime) -> bool:
    return to_local(timestamp).date() == to_local(now).date()


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` months from (year, month), rolling over year boundaries."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_range(months_ago: int, now: datetime) -> Tuple[datetime, datetime]:
    """Inclusive (start, end) instants of the month ``months_ago`` months before ``now``'s month."""
    current = to_local(now)
    year, month = shift_month(current.year, current.month, -months_ago)
    start = datetime(year, month, 1)
    next_year, next_month = shift_month(year, month, 1)
    end = datetime(next_year, next_month, 1) - RESOLUTION
    return start, end


def in_range(timestamp: datetime, start: datetime, end: datetime) -> bool:
    return start <= to_local(timestamp) <= end
