"""Recurring Google Tasks from a declarative schedule."""

from .errors import DecodeError, FormatError, ScheduleError, ValidationError
from .loader import load_schedule, schedule_from_document, schedule_from_records
from .model import PersistedTask, Schedule, ScheduleEntry, Task
from .reconcile import format_due, missing_tasks, reconcile
from .recurrence import DEFAULT_ANCHOR, Frequency, RecurrenceRule, Weekday, decode_rule

__all__ = [
    "DEFAULT_ANCHOR",
    "DecodeError",
    "FormatError",
    "Frequency",
    "PersistedTask",
    "RecurrenceRule",
    "Schedule",
    "ScheduleEntry",
    "ScheduleError",
    "Task",
    "ValidationError",
    "Weekday",
    "decode_rule",
    "format_due",
    "load_schedule",
    "missing_tasks",
    "reconcile",
    "schedule_from_document",
    "schedule_from_records",
]
