"""Build a Schedule from a declarative YAML document.

Document shape::

    tasks:
      - title: Water plants
        freq: weekly
        byweekday: [SU]
      - title: Pay rent
        freq: monthly

``interval`` defaults to 1 and ``byweekday`` to an empty list. A bare
list of records is accepted as well.
"""
from __future__ import annotations

import datetime as _dt
import logging
from pathlib import Path
from typing import Any, List, Mapping, Sequence, Union

from core.yamlio import read_document

from .errors import FormatError, ScheduleError, ValidationError
from .model import Schedule, ScheduleEntry
from .recurrence import DEFAULT_ANCHOR, decode_rule

LOG = logging.getLogger(__name__)

_REQUIRED = ("title", "freq")


def _entry_from_record(index: int, record: Any, anchor: _dt.datetime) -> ScheduleEntry:
    if not isinstance(record, Mapping):
        raise FormatError(f"Task #{index + 1} must be a mapping, got {type(record).__name__}")
    for key in _REQUIRED:
        if record.get(key) is None:
            raise ValidationError(f"Task #{index + 1} is missing required field '{key}'")
    title = record["title"]
    if not isinstance(title, str) or not title.strip():
        raise ValidationError(f"Task #{index + 1} has an empty or non-string title")
    try:
        rule = decode_rule(
            record["freq"],
            record.get("interval"),
            record.get("byweekday"),
            anchor=anchor,
        )
    except ScheduleError as exc:
        LOG.debug("Rejecting task #%d (%s): %s", index + 1, title, exc)
        raise
    return ScheduleEntry(title=title, recurrence=rule)


def schedule_from_records(records: Sequence[Any], *, anchor: _dt.datetime = DEFAULT_ANCHOR) -> Schedule:
    """Decode records in order; the first bad record aborts construction."""
    entries: List[ScheduleEntry] = [
        _entry_from_record(i, rec, anchor) for i, rec in enumerate(records)
    ]
    return Schedule(entries)


def schedule_from_document(doc: Any, *, anchor: _dt.datetime = DEFAULT_ANCHOR) -> Schedule:
    """Accept ``{tasks: [...]}`` or a bare list of task records."""
    if isinstance(doc, Mapping):
        if "tasks" not in doc:
            raise FormatError("Schedule document must have a top-level 'tasks' list")
        records = doc.get("tasks")
        if records is None:
            records = []
    else:
        records = doc
    if not isinstance(records, list):
        raise FormatError("Schedule 'tasks' must be a list")
    return schedule_from_records(records, anchor=anchor)


def load_schedule(path: Union[str, Path], *, anchor: _dt.datetime = DEFAULT_ANCHOR) -> Schedule:
    """Read and decode a schedule YAML file."""
    p = Path(path)
    try:
        doc = read_document(p)
    except FileNotFoundError:
        raise FormatError(f"Schedule file not found: {p}") from None
    except RuntimeError:
        raise
    except Exception as exc:
        # yaml.YAMLError and decoding errors
        raise FormatError(f"Failed to read schedule {p}: {exc}") from exc
    if doc is None:
        raise FormatError(f"Schedule file is empty: {p}")
    schedule = schedule_from_document(doc, anchor=anchor)
    LOG.debug("Loaded %d schedule entries from %s", len(schedule), p)
    return schedule
