"""Schedule model: entries, projected tasks and tasks already in the store."""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from core.date_utils import DateLike, as_utc, to_iso_millis

from .errors import ValidationError
from .recurrence import RecurrenceRule


@dataclass(frozen=True)
class ScheduleEntry:
    title: str
    recurrence: RecurrenceRule

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValidationError("Schedule entry title must be a non-empty string")


@dataclass(frozen=True)
class Task:
    """One projected occurrence of a schedule entry."""

    title: str
    due_date: _dt.datetime

    @property
    def due_iso(self) -> str:
        """Due date as the task store renders it (``...T00:00:00.000Z``)."""
        return to_iso_millis(self.due_date)

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "due": self.due_iso}


@dataclass(frozen=True)
class PersistedTask:
    """A task as returned by the external store; either field may be missing."""

    title: Optional[str] = None
    due: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "PersistedTask":
        title = item.get("title")
        due = item.get("due")
        return cls(
            title=title if isinstance(title, str) else None,
            due=due if isinstance(due, str) else None,
        )


class Schedule:
    """Ordered, read-only collection of schedule entries."""

    def __init__(self, entries: Iterable[ScheduleEntry] = ()) -> None:
        self._entries: Tuple[ScheduleEntry, ...] = tuple(entries)

    @property
    def entries(self) -> Tuple[ScheduleEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"Schedule({len(self._entries)} entries)"

    def describe_lines(self) -> List[str]:
        return [f" - {e.title} - {e.recurrence.describe()}" for e in self._entries]

    def for_range(self, start: DateLike, end: DateLike, *, inclusive: bool = True) -> List[Task]:
        """Expand every entry over the window.

        Output is grouped per entry in schedule order, each group
        chronological. An inverted window returns [].
        """
        lo = as_utc(start)
        hi = as_utc(end)
        tasks: List[Task] = []
        for entry in self._entries:
            for when in entry.recurrence.between(lo, hi, inclusive=inclusive):
                tasks.append(Task(title=entry.title, due_date=when))
        return tasks
