#!/usr/bin/env python3
"""
Command runners behind the trackie CLI.

Each runner loads the log once, applies one operation, saves the log if
it changed and returns a process exit code.
"""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Optional

import typer

from .config import Settings, load_settings
from .duration import format_duration
from .persistence import FileStorage, Storage, load_log, save_log
from .renderer import render_json, render_text
from .report import ReportCreator
from .time_log import (
    Clock,
    InvalidStateError,
    PendingSession,
    TimeLog,
    TrackieError,
    local_now,
)


def report_error(exc: TrackieError) -> int:
    """
    Print a trackie error and return the failure exit code.

    Expected empty states go to stdout without a prefix; real errors go to
    stderr.
    """
    if exc.print_as_error:
        print(f"trackie: {exc}", file=sys.stderr)
    else:
        print(exc)
    return 1


def format_status(pending: PendingSession, now: datetime, template: str) -> str:
    """
    Fill a status template for the pending session.

    Parameters
    ----------
    pending : PendingSession
        Session being tracked.
    now : datetime
        Reference time for the elapsed duration.
    template : str
        Template with ``%p`` (project), ``%d`` (start date), ``%t``
        (start time) and ``%D`` (elapsed duration).

    Returns
    -------
    str
        Rendered status line.

    Examples
    --------
    >>> from datetime import timezone
    >>> session = PendingSession("Foo", datetime(2024, 1, 5, 9, 0, tzinfo=timezone.utc))
    >>> format_status(session, datetime(2024, 1, 5, 10, 5, tzinfo=timezone.utc), "%p %d %t %D")
    'Foo 2024-01-05 09:00 01h 05m'
    """
    return (
        template.replace("%p", pending.project_name)
        .replace("%d", pending.start.strftime("%Y-%m-%d"))
        .replace("%t", pending.start.strftime("%H:%M"))
        .replace("%D", format_duration(pending.elapsed(now)))
    )


def _start_tracking(log: TimeLog, project_name: str) -> None:
    warning = log.start_session(project_name)
    if warning:
        typer.echo(f"{typer.style('WARN:', fg=typer.colors.YELLOW)} {warning}")
    name = project_name.strip()
    typer.echo(f"Tracking time for project {typer.style(name, italic=True)}")


def run_start(
    project_name: str,
    *,
    storage: Optional[Storage] = None,
    clock: Optional[Clock] = None,
) -> int:
    """
    Start tracking a project, auto-closing any pending session.
    """
    try:
        storage = storage or FileStorage()
        log = load_log(storage, clock=clock)
        _start_tracking(log, project_name)
        save_log(storage, log)
    except TrackieError as exc:
        return report_error(exc)
    except ValueError as exc:
        print(f"trackie: start failed: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"trackie: {exc}", file=sys.stderr)
        return 1
    return 0


def run_stop(
    *,
    storage: Optional[Storage] = None,
    clock: Optional[Clock] = None,
) -> int:
    """
    Stop the pending session and print the tracked duration.
    """
    try:
        storage = storage or FileStorage()
        log = load_log(storage, clock=clock)
        entry = log.stop_pending()
        save_log(storage, log)
    except TrackieError as exc:
        return report_error(exc)
    except ValueError as exc:
        print(f"trackie: stop failed: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"trackie: {exc}", file=sys.stderr)
        return 1
    duration = typer.style(format_duration(entry.duration), bold=True)
    project = typer.style(entry.project_name, italic=True)
    typer.echo(f"Tracked {duration} on project {project}")
    return 0


def run_resume(
    *,
    storage: Optional[Storage] = None,
    clock: Optional[Clock] = None,
) -> int:
    """
    Start tracking the project of the most recent entry.
    """
    try:
        storage = storage or FileStorage()
        log = load_log(storage, clock=clock)
        if log.pending is not None:
            raise InvalidStateError(
                f"Already tracking time for project {log.pending.project_name}"
            )
        latest = log.get_latest_entry()
        if latest is None:
            raise InvalidStateError(
                "Unable to find latest time log. Maybe no time was ever tracked?"
            )
        _start_tracking(log, latest.project_name)
        save_log(storage, log)
    except TrackieError as exc:
        return report_error(exc)
    except ValueError as exc:
        print(f"trackie: resume failed: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"trackie: {exc}", file=sys.stderr)
        return 1
    return 0


def run_status(
    *,
    template: Optional[str] = None,
    fallback: Optional[str] = None,
    storage: Optional[Storage] = None,
    clock: Optional[Clock] = None,
    settings: Optional[Settings] = None,
) -> int:
    """
    Print the pending session, or the fallback message with exit code 1.
    """
    settings = settings or load_settings()
    clock = clock or local_now
    try:
        log = load_log(storage or FileStorage(), clock=clock)
        if log.pending is None:
            raise TrackieError(
                fallback or settings.status_fallback,
                print_as_error=False,
            )
    except TrackieError as exc:
        return report_error(exc)
    except ValueError as exc:
        print(f"trackie: status failed: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"trackie: {exc}", file=sys.stderr)
        return 1
    print(format_status(log.pending, clock(), template or settings.status_format))
    return 0


def run_report(
    *,
    days: Optional[int] = None,
    include_empty_days: Optional[bool] = None,
    as_json: bool = False,
    color: bool = True,
    storage: Optional[Storage] = None,
    clock: Optional[Clock] = None,
    settings: Optional[Settings] = None,
) -> int:
    """
    Print the report for the last ``days`` days, ending today.
    """
    settings = settings or load_settings()
    clock = clock or local_now
    num_days = settings.report_days if days is None else days
    include_empty = (
        settings.include_empty_days if include_empty_days is None else include_empty_days
    )
    try:
        log = load_log(storage or FileStorage(), clock=clock)
        report = ReportCreator(log).report_range(clock().date(), num_days, include_empty)
    except TrackieError as exc:
        return report_error(exc)
    except ValueError as exc:
        print(f"trackie: report failed: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"trackie: {exc}", file=sys.stderr)
        return 1
    if as_json:
        print(render_json(report))
    elif not report.days:
        print("No time entries found.")
    else:
        typer.echo(render_text(report, color=color))
    return 0
