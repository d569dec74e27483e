"""Tasks assistant pipeline components."""
from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from core.cli_errors import NetworkError, NotFoundError
from core.cli_output import OutputWriter
from core.pipeline import BaseProducer, SafeProcessor
from core.yamlio import dump_config

from .loader import load_schedule
from .model import PersistedTask, Schedule, Task
from .reconcile import ReconcileReport, reconcile
from .recurrence import DEFAULT_ANCHOR

LOG = logging.getLogger(__name__)

ScheduleLoader = Callable[..., Schedule]


def _window_label(start: _dt.datetime, end: _dt.datetime) -> str:
    return f"{start.date().isoformat()} → {end.date().isoformat()}"


class _WriterProducer(BaseProducer):
    def __init__(self, writer: Optional[OutputWriter] = None) -> None:
        self.out = writer or OutputWriter()


# -----------------------------------------------------------------------------
# show
# -----------------------------------------------------------------------------


@dataclass
class ShowRequest:
    schedule_path: Path
    anchor: _dt.datetime = DEFAULT_ANCHOR


@dataclass
class ShowResult:
    schedule: Schedule


class ShowProcessor(SafeProcessor[ShowRequest, ShowResult]):
    def __init__(self, loader: ScheduleLoader = load_schedule) -> None:
        self._loader = loader

    def _process_safe(self, payload: ShowRequest) -> ShowResult:
        return ShowResult(schedule=self._loader(payload.schedule_path, anchor=payload.anchor))


class ShowProducer(_WriterProducer):
    def _produce_success(self, payload: ShowResult, diagnostics: Optional[Dict[str, Any]]) -> None:
        schedule = payload.schedule
        if self.out.structured:
            rows = [
                {
                    "title": e.title,
                    "freq": e.recurrence.frequency.value,
                    "interval": e.recurrence.interval,
                    "byweekday": [d.name for d in sorted(e.recurrence.weekdays)],
                    "rule": e.recurrence.describe(),
                }
                for e in schedule
            ]
            self.out.print_data(rows)
            return
        self.out.print(f"Schedule ({len(schedule)} entries):")
        for line in schedule.describe_lines():
            self.out.print(line)


# -----------------------------------------------------------------------------
# preview
# -----------------------------------------------------------------------------


@dataclass
class PreviewRequest:
    schedule_path: Path
    start: _dt.datetime
    end: _dt.datetime
    out_path: Optional[Path] = None
    anchor: _dt.datetime = DEFAULT_ANCHOR


@dataclass
class PreviewResult:
    tasks: List[Task]
    start: _dt.datetime
    end: _dt.datetime
    out_path: Optional[Path] = None
    entries: int = 0


class PreviewProcessor(SafeProcessor[PreviewRequest, PreviewResult]):
    """Expand the schedule over the window without touching the network."""

    def __init__(self, loader: ScheduleLoader = load_schedule) -> None:
        self._loader = loader

    def _process_safe(self, payload: PreviewRequest) -> PreviewResult:
        schedule = self._loader(payload.schedule_path, anchor=payload.anchor)
        tasks = schedule.for_range(payload.start, payload.end)
        if payload.out_path is not None:
            dump_config(str(payload.out_path), {"tasks": [t.to_dict() for t in tasks]})
        return PreviewResult(
            tasks=tasks,
            start=payload.start,
            end=payload.end,
            out_path=payload.out_path,
            entries=len(schedule),
        )


class PreviewProducer(_WriterProducer):
    def _produce_success(self, payload: PreviewResult, diagnostics: Optional[Dict[str, Any]]) -> None:
        if self.out.structured:
            self.out.print_data([t.to_dict() for t in payload.tasks], headers=["due", "title"])
            return
        self.out.print_verbose(f"Expanded {payload.entries} schedule entries")
        self.out.print(f"Window {_window_label(payload.start, payload.end)}: {len(payload.tasks)} tasks")
        for t in payload.tasks:
            self.out.print(f"  {t.due_date.date().isoformat()}  {t.title}")
        if payload.out_path is not None:
            self.out.print(f"Wrote {len(payload.tasks)} tasks to {payload.out_path}")


# -----------------------------------------------------------------------------
# lists
# -----------------------------------------------------------------------------


@dataclass
class ListsRequest:
    client: Any


@dataclass
class ListsResult:
    task_lists: List[Dict[str, Any]]


class ListsProcessor(SafeProcessor[ListsRequest, ListsResult]):
    def _process_safe(self, payload: ListsRequest) -> ListsResult:
        return ListsResult(task_lists=list(payload.client.list_task_lists()))


class ListsProducer(_WriterProducer):
    def _produce_success(self, payload: ListsResult, diagnostics: Optional[Dict[str, Any]]) -> None:
        rows = [{"title": tl.get("title"), "id": tl.get("id")} for tl in payload.task_lists]
        if self.out.structured:
            self.out.print_data(rows)
            return
        if not rows:
            self.out.print("No task lists found.")
            return
        self.out.print("Task lists:")
        for row in rows:
            self.out.print(f"{row['title']} ({row['id']})")


# -----------------------------------------------------------------------------
# sync
# -----------------------------------------------------------------------------


@dataclass
class SyncRequest:
    schedule_path: Path
    list_title: str
    start: _dt.datetime
    end: _dt.datetime
    apply: bool
    client: Any
    anchor: _dt.datetime = DEFAULT_ANCHOR


@dataclass
class SyncResult:
    list_title: str
    list_id: str
    start: _dt.datetime
    end: _dt.datetime
    report: ReconcileReport
    applied: bool
    created: List[Task] = field(default_factory=list)


class SyncProcessor(SafeProcessor[SyncRequest, SyncResult]):
    """Create the projected tasks that are not in the task list yet.

    The delta is always recomputed from the list's full current contents,
    so re-running after a partial failure only creates what is still
    missing.
    """

    def __init__(self, loader: ScheduleLoader = load_schedule) -> None:
        self._loader = loader

    def _process_safe(self, payload: SyncRequest) -> SyncResult:
        schedule = self._loader(payload.schedule_path, anchor=payload.anchor)
        projected = schedule.for_range(payload.start, payload.end)

        client = payload.client
        task_list = client.find_task_list(payload.list_title)
        if not task_list:
            raise NotFoundError(
                f"{payload.list_title} list is missing!",
                hint="Create the list in Google Tasks or pass --list TITLE",
            )
        list_id = str(task_list.get("id"))
        LOG.debug("Using task list %s (%s)", payload.list_title, list_id)

        persisted = [PersistedTask.from_api(item) for item in client.list_tasks(list_id)]
        report = reconcile(projected, persisted)
        result = SyncResult(
            list_title=payload.list_title,
            list_id=list_id,
            start=payload.start,
            end=payload.end,
            report=report,
            applied=payload.apply,
        )
        if not payload.apply:
            return result

        for task in report.missing:
            try:
                client.create_task(list_id, task.title, task.due_iso)
            except Exception as exc:
                raise NetworkError(
                    f"Failed to create task '{task.title}' due {task.due_iso} "
                    f"after creating {len(result.created)} of {len(report.missing)}: {exc}",
                    hint="Re-run sync; tasks already created will be skipped",
                ) from exc
            LOG.info("Created %s due %s", task.title, task.due_iso)
            result.created.append(task)
        return result


class SyncProducer(_WriterProducer):
    def _produce_success(self, payload: SyncResult, diagnostics: Optional[Dict[str, Any]]) -> None:
        report = payload.report
        if self.out.structured:
            self.out.print_data(
                {
                    "list": payload.list_title,
                    "list_id": payload.list_id,
                    "from": payload.start.date().isoformat(),
                    "to": payload.end.date().isoformat(),
                    "planned": report.planned,
                    "existing": report.existing,
                    "present": report.present,
                    "missing": [t.to_dict() for t in report.missing],
                    "created": [t.to_dict() for t in payload.created],
                    "applied": payload.applied,
                }
            )
            return
        self.out.print(
            f"Synced window {_window_label(payload.start, payload.end)} "
            f"on '{payload.list_title}' ({payload.list_id})"
        )
        self.out.print(
            f"Planned: {report.planned}; existing in list: {report.existing}; "
            f"already present: {report.present}; missing: {len(report.missing)}"
        )
        if not report.missing:
            self.out.print("Nothing to create.")
            return
        if not payload.applied:
            for t in report.missing:
                self.out.print_dry_run(f"Would create: {t.title} ({t.due_iso})")
            self.out.print(f"Would create {len(report.missing)} tasks. Re-run with --apply to create them.")
            return
        for t in payload.created:
            self.out.print(f"Created: {t.title} ({t.due_iso})")
        self.out.print(f"Created {len(payload.created)} tasks.")
