"""Tasks Assistant CLI

Keeps a Google Tasks list in step with a YAML schedule of recurring
chores:
- show: print the decoded schedule
- preview: expand the schedule over a window (offline)
- lists: list Google task lists
- sync: create the tasks in the window that the list does not have yet
  (dry-run by default; --apply creates)

Re-running sync for the same window is safe: the delta is recomputed
from the list's current contents each time.
"""
from __future__ import annotations

import argparse
import datetime as _dt
from pathlib import Path
from typing import List, Optional, Tuple

from core.auth import build_tasks_client_from_args, settings_from_args
from core.cli_errors import UsageError
from core.cli_framework import CLIApp
from core.constants import DEFAULT_SCHEDULE_PATH
from core.date_utils import current_month, date_window, month_window, parse_month
from core.pipeline import run_pipeline

from .pipeline import (
    ListsProcessor,
    ListsProducer,
    ListsRequest,
    PreviewProcessor,
    PreviewProducer,
    PreviewRequest,
    ShowProcessor,
    ShowProducer,
    ShowRequest,
    SyncProcessor,
    SyncProducer,
    SyncRequest,
)

app = CLIApp(
    "tasks-assistant",
    "Create recurring Google Tasks from a YAML schedule, skipping ones that already exist.",
    version="0.1.0",
    add_common_args=True,
)


def _resolve_window(args: argparse.Namespace) -> Tuple[_dt.datetime, _dt.datetime]:
    """--month, or --from/--to, or the current UTC month."""
    month = getattr(args, "month", None)
    from_date = getattr(args, "from_date", None)
    to_date = getattr(args, "to_date", None)
    if month and (from_date or to_date):
        raise UsageError("Use either --month or --from/--to, not both")
    try:
        if month:
            return month_window(*parse_month(month))
        if from_date or to_date:
            if not (from_date and to_date):
                raise UsageError("--from and --to must be given together (YYYY-MM-DD)")
            return date_window(from_date, to_date)
    except ValueError as exc:
        raise UsageError(str(exc)) from exc
    return month_window(*current_month())


def _schedule_path(args: argparse.Namespace) -> Path:
    return Path(getattr(args, "schedule", None) or DEFAULT_SCHEDULE_PATH)


@app.command("show", help="Print the schedule as decoded from YAML")
@app.argument("--schedule", default=DEFAULT_SCHEDULE_PATH, help=f"Schedule YAML path (default {DEFAULT_SCHEDULE_PATH})")
def cmd_show(args: argparse.Namespace) -> int:
    request = ShowRequest(schedule_path=_schedule_path(args))
    return run_pipeline(request, ShowProcessor(), ShowProducer(args._output))


@app.command("preview", help="Expand the schedule over a window without contacting Google")
@app.argument("--schedule", default=DEFAULT_SCHEDULE_PATH, help=f"Schedule YAML path (default {DEFAULT_SCHEDULE_PATH})")
@app.argument("--month", help="Calendar month YYYY-MM (default: current UTC month)")
@app.argument("--from", dest="from_date", help="Start date YYYY-MM-DD (inclusive)")
@app.argument("--to", dest="to_date", help="End date YYYY-MM-DD (inclusive)")
@app.argument("--out", help="Also write the projected tasks to this YAML path")
def cmd_preview(args: argparse.Namespace) -> int:
    start, end = _resolve_window(args)
    out = getattr(args, "out", None)
    request = PreviewRequest(
        schedule_path=_schedule_path(args),
        start=start,
        end=end,
        out_path=Path(out) if out else None,
    )
    return run_pipeline(request, PreviewProcessor(), PreviewProducer(args._output))


@app.command("lists", help="List Google task lists")
@app.argument("--credentials", help="OAuth client secrets JSON")
@app.argument("--token", help="Token cache path")
def cmd_lists(args: argparse.Namespace) -> int:
    client = build_tasks_client_from_args(args)
    return run_pipeline(ListsRequest(client=client), ListsProcessor(), ListsProducer(args._output))


@app.command("sync", help="Create missing tasks for the window (dry-run by default)")
@app.argument("--schedule", default=DEFAULT_SCHEDULE_PATH, help=f"Schedule YAML path (default {DEFAULT_SCHEDULE_PATH})")
@app.argument("--list", dest="list_title", help="Target task list title (default 'Monthly Tasks')")
@app.argument("--month", help="Calendar month YYYY-MM (default: current UTC month)")
@app.argument("--from", dest="from_date", help="Start date YYYY-MM-DD (inclusive)")
@app.argument("--to", dest="to_date", help="End date YYYY-MM-DD (inclusive)")
@app.argument("--apply", action="store_true", help="Create the missing tasks (omit for dry-run)")
@app.argument("--credentials", help="OAuth client secrets JSON")
@app.argument("--token", help="Token cache path")
def cmd_sync(args: argparse.Namespace) -> int:
    start, end = _resolve_window(args)
    settings = settings_from_args(args, list_title=getattr(args, "list_title", None))
    apply = bool(getattr(args, "apply", False)) and not bool(getattr(args, "dry_run", False))
    client = build_tasks_client_from_args(args, settings=settings)
    request = SyncRequest(
        schedule_path=_schedule_path(args),
        list_title=settings.list_title,
        start=start,
        end=end,
        apply=apply,
        client=client,
    )
    return run_pipeline(request, SyncProcessor(), SyncProducer(args._output))


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI."""
    return app.run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
