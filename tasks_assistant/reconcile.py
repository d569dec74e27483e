"""Work out which projected tasks the store does not have yet.

A projected task is present when some stored task has exactly the same
title and exactly the same ``due`` string as the projection rendered in
the store's format. Stored tasks missing either field never match.
"""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from core.date_utils import to_iso_millis

from .model import PersistedTask, Task

Key = Tuple[str, str]


def format_due(due_date: _dt.datetime) -> str:
    return to_iso_millis(due_date)


def task_key(task: Task) -> Key:
    return (task.title, format_due(task.due_date))


def persisted_key(item: PersistedTask) -> Optional[Key]:
    if not isinstance(item.title, str) or not isinstance(item.due, str):
        return None
    return (item.title, item.due)


def existing_keys(persisted: Iterable[PersistedTask]) -> Set[Key]:
    keys: Set[Key] = set()
    for item in persisted:
        key = persisted_key(item)
        if key is not None:
            keys.add(key)
    return keys


def missing_tasks(projected: Sequence[Task], persisted: Iterable[PersistedTask]) -> List[Task]:
    """Projected tasks with no exact match in ``persisted``, in projected order."""
    have = existing_keys(persisted)
    return [t for t in projected if task_key(t) not in have]


@dataclass(frozen=True)
class ReconcileReport:
    planned: int
    existing: int
    missing: List[Task]

    @property
    def present(self) -> int:
        return self.planned - len(self.missing)


def reconcile(projected: Sequence[Task], persisted: Sequence[PersistedTask]) -> ReconcileReport:
    return ReconcileReport(
        planned=len(projected),
        existing=len(persisted),
        missing=missing_tasks(projected, persisted),
    )
