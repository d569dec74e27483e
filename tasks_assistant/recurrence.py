"""Recurrence rules: decode from schedule tokens and expand over a window.

A rule repeats daily, weekly or monthly every ``interval`` units. Phase is
fixed by ``anchor``: the anchor's day is occurrence zero for daily rules,
the anchor's (Monday-based) week is week zero for weekly rules and the
anchor's month is month zero for monthly rules. Occurrences keep the
anchor's time of day and never precede it.

All rules in a run share one anchor (``DEFAULT_ANCHOR`` unless a caller
passes another), so expanding the same window twice always yields the
same dates regardless of the machine's zone.
"""
from __future__ import annotations

import calendar
import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import FrozenSet, Iterable, Iterator, List

from core.date_utils import DAY_NAMES, UTC, DateLike, as_utc

from .errors import DecodeError, ValidationError

__all__ = [
    "DEFAULT_ANCHOR",
    "Frequency",
    "Weekday",
    "RecurrenceRule",
    "decode_frequency",
    "decode_weekday",
    "decode_interval",
    "decode_rule",
]

# 2000-02-01 00:00 UTC (a Tuesday)
DEFAULT_ANCHOR = _dt.datetime(2000, 2, 1, 0, 0, tzinfo=UTC)


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Weekday(IntEnum):
    """Weekday codes; values match ``date.weekday()``."""

    MO = 0
    TU = 1
    WE = 2
    TH = 3
    FR = 4
    SA = 5
    SU = 6

    @property
    def label(self) -> str:
        return DAY_NAMES[self.value]


_FREQUENCIES = {f.value: f for f in Frequency}
_WEEKDAYS = {w.name: w for w in Weekday}


def decode_frequency(token: object) -> Frequency:
    """Map ``daily``/``weekly``/``monthly`` (case-sensitive) to a Frequency."""
    if isinstance(token, str) and token in _FREQUENCIES:
        return _FREQUENCIES[token]
    raise DecodeError(f"Frequency '{token}' is not understood.", token=token)


def decode_weekday(token: object) -> Weekday:
    """Map a two-letter code (``MO`` .. ``SU``, case-sensitive) to a Weekday."""
    if isinstance(token, str) and token in _WEEKDAYS:
        return _WEEKDAYS[token]
    raise DecodeError(f"Week day '{token}' is not understood.", token=token)


def decode_interval(value: object) -> int:
    """Return a positive interval; None means 1."""
    if value is None:
        return 1
    # bool is an int subclass; `interval: true` is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Interval must be a positive integer, got {value!r}")
    if value < 1:
        raise ValidationError(f"Interval must be a positive integer, got {value!r}")
    return value


def decode_rule(
    freq: object,
    interval: object = None,
    byweekday: object = None,
    *,
    anchor: _dt.datetime = DEFAULT_ANCHOR,
) -> "RecurrenceRule":
    """Build a RecurrenceRule from raw schedule tokens."""
    frequency = decode_frequency(freq)
    if byweekday is None:
        weekdays: FrozenSet[Weekday] = frozenset()
    elif isinstance(byweekday, (list, tuple)):
        weekdays = frozenset(decode_weekday(tok) for tok in byweekday)
    else:
        raise ValidationError(f"byweekday must be a list of day codes, got {byweekday!r}")
    return RecurrenceRule(
        frequency=frequency,
        interval=decode_interval(interval),
        weekdays=weekdays,
        anchor=anchor,
    )


def _join_days(days: Iterable[Weekday]) -> str:
    return ", ".join(d.label for d in sorted(days))


@dataclass(frozen=True)
class RecurrenceRule:
    frequency: Frequency
    interval: int = 1
    weekdays: FrozenSet[Weekday] = field(default_factory=frozenset)
    anchor: _dt.datetime = DEFAULT_ANCHOR

    def __post_init__(self) -> None:
        decode_interval(self.interval)
        if self.anchor.tzinfo is None or self.anchor.utcoffset() is None:
            raise ValidationError("Recurrence anchor must be timezone-aware")
        object.__setattr__(self, "frequency", Frequency(self.frequency))
        object.__setattr__(self, "weekdays", frozenset(Weekday(d) for d in self.weekdays))
        object.__setattr__(self, "anchor", self.anchor.astimezone(UTC))

    @property
    def effective_weekdays(self) -> FrozenSet[Weekday]:
        """Weekdays a weekly rule fires on; the anchor's weekday when none are given."""
        if self.weekdays:
            return self.weekdays
        return frozenset({Weekday(self.anchor.weekday())})

    def describe(self) -> str:
        """Human-readable text, e.g. ``every 2 weeks on Sunday``."""
        n = self.interval
        if self.frequency is Frequency.DAILY:
            text = "every day" if n == 1 else f"every {n} days"
            if self.weekdays:
                text += f" on {_join_days(self.weekdays)}"
            return text
        if self.frequency is Frequency.WEEKLY:
            text = "every week" if n == 1 else f"every {n} weeks"
            return f"{text} on {_join_days(self.effective_weekdays)}"
        text = "every month" if n == 1 else f"every {n} months"
        return f"{text} on day {self.anchor.day}"

    def to_rrule(self) -> str:
        """RFC 5545 style rule text (without DTSTART)."""
        parts = [f"FREQ={self.frequency.name}", f"INTERVAL={self.interval}"]
        if self.frequency is not Frequency.MONTHLY and self.weekdays:
            parts.append("BYDAY=" + ",".join(d.name for d in sorted(self.weekdays)))
        return ";".join(parts)

    def between(self, start: DateLike, end: DateLike, *, inclusive: bool = True) -> List[_dt.datetime]:
        """Occurrences within [start, end] in chronological order.

        With ``inclusive=False`` occurrences equal to either bound are
        dropped. ``start > end`` yields an empty list.
        """
        lo = as_utc(start)
        hi = as_utc(end)
        if lo > hi:
            return []
        if self.frequency is Frequency.DAILY:
            found = self._iter_daily(lo, hi)
        elif self.frequency is Frequency.WEEKLY:
            found = self._iter_weekly(lo, hi)
        else:
            found = self._iter_monthly(lo, hi)
        if inclusive:
            return list(found)
        return [dt for dt in found if lo < dt < hi]

    # Each iterator yields ascending occurrences in [max(lo, anchor), hi].

    def _iter_daily(self, lo: _dt.datetime, hi: _dt.datetime) -> Iterator[_dt.datetime]:
        step = _dt.timedelta(days=self.interval)
        first = max(lo, self.anchor)
        # ceil((first - anchor) / step)
        k = -((self.anchor - first) // step)
        # compare offsets, not datetimes, so nothing steps past datetime.max
        if k * step > hi - self.anchor:
            return
        cur = self.anchor + k * step
        while True:
            if not self.weekdays or cur.weekday() in self.weekdays:
                yield cur
            if hi - cur < step:
                return
            cur += step

    def _iter_weekly(self, lo: _dt.datetime, hi: _dt.datetime) -> Iterator[_dt.datetime]:
        # Day ordinals are plain ints; only days <= hi become dates.
        days = sorted(d.value for d in self.effective_weekdays)
        clock = self.anchor.timetz()
        first = max(lo, self.anchor)
        last = hi.date().toordinal()
        anchor_week = self.anchor.date().toordinal() - self.anchor.weekday()
        week = first.date().toordinal() - first.weekday()
        behind = ((week - anchor_week) // 7) % self.interval
        if behind:
            week += 7 * (self.interval - behind)
        while week <= last:
            for wd in days:
                if week + wd > last:
                    return
                cur = _dt.datetime.combine(_dt.date.fromordinal(week + wd), clock)
                if cur < first:
                    continue
                if cur > hi:
                    return
                yield cur
            week += 7 * self.interval

    def _iter_monthly(self, lo: _dt.datetime, hi: _dt.datetime) -> Iterator[_dt.datetime]:
        clock = self.anchor.timetz()
        day = self.anchor.day
        first = max(lo, self.anchor)
        base = self.anchor.year * 12 + self.anchor.month - 1
        index = first.year * 12 + first.month - 1
        behind = (index - base) % self.interval
        if behind:
            index += self.interval - behind
        last = hi.year * 12 + hi.month - 1
        while index <= last:
            year, month0 = divmod(index, 12)
            # Months without the anchor's day are skipped, not clamped
            if day <= calendar.monthrange(year, month0 + 1)[1]:
                cur = _dt.datetime.combine(_dt.date(year, month0 + 1, day), clock)
                if first <= cur <= hi:
                    yield cur
            index += self.interval

