"""Shared date and time utilities.

Everything here works in UTC. Recurrence phase must not depend on the
machine's local zone, so naive values are read as UTC rather than local
time.
"""
from __future__ import annotations

import calendar
import datetime as _dt
from typing import Optional, Tuple, Union

from .constants import FMT_MONTH

__all__ = [
    "DAY_NAMES",
    "UTC",
    "as_utc",
    "current_month",
    "month_window",
    "date_window",
    "parse_month",
    "to_iso_millis",
]

UTC = _dt.timezone.utc

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

DateLike = Union[_dt.datetime, _dt.date]


def as_utc(value: DateLike) -> _dt.datetime:
    """Coerce a date or datetime into an aware UTC datetime.

    Dates become midnight UTC, naive datetimes are taken as UTC and aware
    datetimes are converted.
    """
    if isinstance(value, _dt.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    if isinstance(value, _dt.date):
        return _dt.datetime(value.year, value.month, value.day, tzinfo=UTC)
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def to_iso_millis(value: DateLike) -> str:
    """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    This is the shape Google Tasks returns for ``due``.
    """
    dt = as_utc(value)
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}Z"


def parse_month(month_str: str) -> Tuple[int, int]:
    """Parse ``YYYY-MM`` into (year, month)."""
    try:
        parsed = _dt.datetime.strptime((month_str or "").strip(), FMT_MONTH)
    except ValueError:
        raise ValueError(f"Invalid month '{month_str}'; expected YYYY-MM") from None
    return parsed.year, parsed.month


def month_window(year: int, month: int) -> Tuple[_dt.datetime, _dt.datetime]:
    """Return the inclusive UTC bounds of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    start = _dt.datetime(year, month, 1, tzinfo=UTC)
    end = _dt.datetime(year, month, last_day, 23, 59, 59, 999999, tzinfo=UTC)
    return start, end


def date_window(from_date: str, to_date: str) -> Tuple[_dt.datetime, _dt.datetime]:
    """Return inclusive UTC bounds covering two ``YYYY-MM-DD`` dates."""
    try:
        d0 = _dt.date.fromisoformat(str(from_date).strip())
        d1 = _dt.date.fromisoformat(str(to_date).strip())
    except ValueError:
        raise ValueError("Invalid --from/--to date format; expected YYYY-MM-DD") from None
    start = _dt.datetime(d0.year, d0.month, d0.day, tzinfo=UTC)
    end = _dt.datetime(d1.year, d1.month, d1.day, 23, 59, 59, 999999, tzinfo=UTC)
    return start, end


def current_month(now: Optional[_dt.datetime] = None) -> Tuple[int, int]:
    """Return (year, month) for ``now`` in UTC (defaults to the current time)."""
    ref = as_utc(now) if now is not None else _dt.datetime.now(UTC)
    return ref.year, ref.month
