#!/usr/bin/env python3
"""
Time log state for trackie start/stop workflows.

The log holds at most one pending session plus the closed entries filed
under the calendar day they ended on. It is a plain in-memory snapshot:
loading and saving belong to :mod:`trackie.persistence`, and every
timestamp comes from an injected clock.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, Callable, Dict, List, Optional

Clock = Callable[[], datetime]

NOT_TRACKING_MESSAGE = "No time is currently tracked."


class TrackieError(Exception):
    """
    User-facing failure of a trackie operation.

    Parameters
    ----------
    message : str
        Message shown to the user.
    print_as_error : bool, optional
        False for expected empty states that belong on stdout (default: True).
    """

    def __init__(self, message: str, *, print_as_error: bool = True) -> None:
        super().__init__(message)
        self.message = message
        self.print_as_error = print_as_error

    def __str__(self) -> str:
        return self.message


class InvalidStateError(TrackieError):
    """
    Operation not allowed in the current tracking state.
    """


class SnapshotError(TrackieError):
    """
    Persisted snapshot could not be decoded.
    """


def get_local_timezone() -> tzinfo:
    """
    Return the local timezone for timestamps.

    Returns
    -------
    tzinfo
        Local timezone, defaulting to UTC if unavailable.
    """
    tzinfo = datetime.now().astimezone().tzinfo
    return tzinfo if tzinfo is not None else timezone.utc


def local_now() -> datetime:
    """
    Return the current local time as an aware datetime.
    """
    return datetime.now(get_local_timezone())


@dataclass(frozen=True)
class PendingSession:
    """
    Session that is currently being tracked.

    Attributes
    ----------
    project_name : str
        Project the time is tracked against.
    start : datetime
        Start timestamp.
    """

    project_name: str
    start: datetime

    def elapsed(self, now: datetime) -> timedelta:
        """
        Return the time tracked so far.

        Parameters
        ----------
        now : datetime
            Reference time.

        Returns
        -------
        timedelta
            Elapsed time since the session started.
        """
        return now - self.start


@dataclass(frozen=True)
class ClosedEntry:
    """
    Completed tracking interval.

    Attributes
    ----------
    project_name : str
        Project the time was tracked against.
    start : datetime
        Start timestamp.
    end : datetime
        End timestamp, never before ``start``.
    """

    project_name: str
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(
                f"Entry for {self.project_name} ends before it starts."
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def day(self) -> date:
        return self.end.date()


@dataclass
class TimeLog:
    """
    Pending session and closed entries grouped by day.

    Attributes
    ----------
    pending : Optional[PendingSession]
        Session being tracked, if any.
    entries_by_day : Dict[date, List[ClosedEntry]]
        Closed entries keyed by the day they ended, in insertion order.
    clock : Clock
        Source of timestamps for start and stop.
    """

    pending: Optional[PendingSession] = None
    entries_by_day: Dict[date, List[ClosedEntry]] = field(default_factory=dict)
    clock: Clock = field(default=local_now, compare=False, repr=False)

    @property
    def is_tracking(self) -> bool:
        return self.pending is not None

    def start_session(self, project_name: str) -> Optional[str]:
        """
        Start tracking a project, closing any pending session first.

        Parameters
        ----------
        project_name : str
            Project to track.

        Returns
        -------
        Optional[str]
            Warning naming the auto-closed project, if one was pending.

        Raises
        ------
        ValueError
            If the project name is blank.
        """
        name = project_name.strip()
        if not name:
            raise ValueError("Project name is required.")
        warning = None
        if self.pending is not None:
            warning = f"Stopping time-tracking for {self.pending.project_name}"
            self.stop_pending()
        self.pending = PendingSession(project_name=name, start=self.clock())
        return warning

    def stop_pending(self) -> ClosedEntry:
        """
        Close the pending session at the current time.

        Returns
        -------
        ClosedEntry
            The entry that was just filed.

        Raises
        ------
        InvalidStateError
            If nothing is being tracked.
        """
        if self.pending is None:
            raise InvalidStateError(NOT_TRACKING_MESSAGE)
        entry = ClosedEntry(
            project_name=self.pending.project_name,
            start=self.pending.start,
            end=self.clock(),
        )
        self._file_entry(entry)
        self.pending = None
        return entry

    def _file_entry(self, entry: ClosedEntry, day: Optional[date] = None) -> None:
        key = day or entry.day
        if key not in self.entries_by_day:
            self.entries_by_day[key] = []
            self.entries_by_day = dict(sorted(self.entries_by_day.items()))
        self.entries_by_day[key].append(entry)

    def days(self) -> List[date]:
        """
        Return the days that have entries, ascending.
        """
        return sorted(self.entries_by_day)

    def for_day(self, day: date) -> List[ClosedEntry]:
        """
        Return entries filed under a day.

        Parameters
        ----------
        day : date
            Calendar day.

        Returns
        -------
        List[ClosedEntry]
            Entries in insertion order; empty when none were filed.
        """
        return list(self.entries_by_day.get(day, ()))

    def get_latest_entry(self) -> Optional[ClosedEntry]:
        """
        Return the most recently closed entry.

        Returns
        -------
        Optional[ClosedEntry]
            Last entry of the latest day, or None for an empty log.
        """
        for day in reversed(self.days()):
            entries = self.entries_by_day[day]
            if entries:
                return entries[-1]
        return None

    def to_snapshot(self) -> Dict[str, Any]:
        """
        Return the JSON-ready snapshot of the log.
        """
        pending = None
        if self.pending is not None:
            pending = {
                "project_name": self.pending.project_name,
                "start": format_timestamp(self.pending.start),
            }
        return {
            "pending": pending,
            "entries": {
                day.isoformat(): [_entry_payload(entry) for entry in entries]
                for day, entries in sorted(self.entries_by_day.items())
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_snapshot(), indent=2, ensure_ascii=False)

    @classmethod
    def from_snapshot(
        cls,
        payload: Any,
        *,
        clock: Optional[Clock] = None,
    ) -> "TimeLog":
        """
        Build a log from a decoded snapshot.

        Parameters
        ----------
        payload : Any
            Decoded JSON document.
        clock : Optional[Clock], optional
            Clock for later mutations (defaults to local time).

        Returns
        -------
        TimeLog
            Restored log.

        Raises
        ------
        SnapshotError
            If the snapshot is malformed or an entry is filed under a day
            other than the one it ended on.
        """
        if not isinstance(payload, dict):
            raise SnapshotError("Time log snapshot must be a JSON object.")
        log = cls(clock=clock or local_now)
        raw_pending = payload.get("pending")
        if raw_pending is not None:
            if not isinstance(raw_pending, dict):
                raise SnapshotError("Pending session must be an object.")
            log.pending = PendingSession(
                project_name=_project_name(raw_pending),
                start=parse_timestamp(raw_pending.get("start")),
            )
        raw_entries = payload.get("entries") or {}
        if isinstance(raw_entries, list):
            # Older snapshots kept one flat list of entries.
            for raw in raw_entries:
                log._file_entry(_entry_from_payload(raw))
        elif isinstance(raw_entries, dict):
            for raw_day, raw_list in raw_entries.items():
                day = parse_day(raw_day)
                if not isinstance(raw_list, list):
                    raise SnapshotError(f"Entries for {raw_day} must be a list.")
                log.entries_by_day.setdefault(day, [])
                for raw in raw_list:
                    entry = _entry_from_payload(raw)
                    if entry.day != day:
                        raise SnapshotError(
                            f"Entry for {entry.project_name} ending "
                            f"{format_timestamp(entry.end)} is filed under {raw_day}."
                        )
                    log._file_entry(entry, day)
            log.entries_by_day = dict(sorted(log.entries_by_day.items()))
        else:
            raise SnapshotError("Entries must be an object keyed by date.")
        return log

    @classmethod
    def from_json(cls, content: str, *, clock: Optional[Clock] = None) -> "TimeLog":
        """
        Decode a log from snapshot JSON text.

        Raises
        ------
        SnapshotError
            If the text is not valid JSON or not a valid snapshot.
        """
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Time log is not valid JSON: {exc}") from exc
        return cls.from_snapshot(payload, clock=clock)


def format_timestamp(value: datetime) -> str:
    """
    Format a timestamp as ISO-8601 with offset.

    Examples
    --------
    >>> format_timestamp(datetime(2024, 1, 5, 9, 30, tzinfo=timezone.utc))
    '2024-01-05T09:30:00+00:00'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_local_timezone())
    return value.isoformat()


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a stored timestamp.

    Parameters
    ----------
    value : Any
        Stored timestamp string.

    Returns
    -------
    datetime
        Aware datetime; naive values are taken as local time.

    Raises
    ------
    SnapshotError
        If the value is missing or not ISO-8601.

    Examples
    --------
    >>> parse_timestamp("2024-01-05T09:30:00Z").isoformat()
    '2024-01-05T09:30:00+00:00'
    """
    text = str(value or "").strip()
    if not text:
        raise SnapshotError("Timestamp is missing.")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise SnapshotError(f"Invalid timestamp: {value}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=get_local_timezone())
    return parsed


def parse_day(value: Any) -> date:
    """
    Parse an ISO calendar-date key.

    Raises
    ------
    SnapshotError
        If the value is not ``YYYY-MM-DD``.
    """
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise SnapshotError(f"Invalid date: {value}") from exc


def _project_name(raw: Dict[str, Any]) -> str:
    name = str(raw.get("project_name") or raw.get("key") or "").strip()
    if not name:
        raise SnapshotError("Entry is missing its project name.")
    return name


def _entry_payload(entry: ClosedEntry) -> Dict[str, str]:
    return {
        "project_name": entry.project_name,
        "start": format_timestamp(entry.start),
        "end": format_timestamp(entry.end),
    }


def _entry_from_payload(raw: Any) -> ClosedEntry:
    if not isinstance(raw, dict):
        raise SnapshotError("Entry must be an object.")
    try:
        return ClosedEntry(
            project_name=_project_name(raw),
            start=parse_timestamp(raw.get("start")),
            end=parse_timestamp(raw.get("end")),
        )
    except ValueError as exc:
        raise SnapshotError(str(exc)) from exc
