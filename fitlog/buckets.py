# backend/fitlog/buckets.py
"""
Calendar bucket ids for the weekly / monthly rollups.

The ids are only ever compared for equality against the id stored on a
profile; they are never parsed back into dates.
"""
from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime]


def _as_date(d: DateLike) -> date:
    if isinstance(d, datetime):
        return d.date()
    return d


def week_id(d: DateLike) -> str:
    """ISO week bucket, e.g. ``2025-W01`` (ISO year, Monday-start weeks)."""
    iso_year, iso_week, _ = _as_date(d).isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def month_id(d: DateLike) -> str:
    d = _as_date(d)
    return f"{d.year}-{d.month:02d}"


def days_between(earlier: DateLike, later: DateLike) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (time of day ignored)."""
    return (_as_date(later) - _as_date(earlier)).days
