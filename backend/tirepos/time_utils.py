from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

"""
Local-time semantics (authoritative)

- Every stored timestamp is the shop's local wall-clock time, naive, whole seconds.
- Reports bucket by local calendar date. Nothing is converted to UTC: a sale rung up
  at 23:30 belongs to that evening's takings, not tomorrow's.
- Date filters are inclusive on calendar dates and are executed as half-open
  datetime ranges: start 00:00:00 <= created_at < (end + 1 day) 00:00:00.
"""

LOCAL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
LOCAL_DATE_FORMAT = "%Y-%m-%d"


def local_now() -> datetime:
    """Server-side 'now' in local wall-clock time (naive, seconds precision)."""
    return datetime.now().replace(microsecond=0)


def local_today() -> date:
    return local_now().date()


def parse_local_date(value: Optional[str | date]) -> Optional[date]:
    """
    Parse a "YYYY-MM-DD" calendar date.

    - None / "" -> None
    - date instances pass through (datetimes are reduced to their date)
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = value.strip()
    if not s:
        return None
    return datetime.strptime(s, LOCAL_DATE_FORMAT).date()


def day_bounds(start: date, end: Optional[date] = None) -> tuple[datetime, datetime]:
    """Half-open [start 00:00, day after end 00:00) covering whole local days."""
    end = end or start
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


def format_local(dt: Optional[datetime]) -> Optional[str]:
    """Serialize as "YYYY-MM-DD HH:MM:SS" with no timezone suffix."""
    if dt is None:
        return None
    return dt.strftime(LOCAL_DATETIME_FORMAT)


def format_date(d: Optional[date]) -> Optional[str]:
    if d is None:
        return None
    return d.strftime(LOCAL_DATE_FORMAT)
