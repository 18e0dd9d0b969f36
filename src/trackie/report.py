#!/usr/bin/env python3
"""
Aggregate closed time-log entries into day and range reports.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

from .time_log import ClosedEntry, TimeLog


def sum_durations(values: Iterable[timedelta]) -> timedelta:
    """
    Sum durations, starting from zero.

    Examples
    --------
    >>> sum_durations([timedelta(minutes=30), timedelta(minutes=10)])
    datetime.timedelta(seconds=2400)
    >>> sum_durations([])
    datetime.timedelta(0)
    """
    return sum(values, timedelta(0))


@dataclass(frozen=True)
class ProjectReport:
    """
    Time spent on one project during one day.

    Attributes
    ----------
    name : str
        Project name.
    duration : timedelta
        Summed duration of the project's entries.
    """

    name: str
    duration: timedelta


@dataclass(frozen=True)
class DayReport:
    """
    Per-project totals for one day, sorted by project name.
    """

    date: date
    projects: Tuple[ProjectReport, ...] = ()

    @property
    def total_duration(self) -> timedelta:
        return sum_durations(project.duration for project in self.projects)

    @property
    def is_empty(self) -> bool:
        return not self.projects


@dataclass(frozen=True)
class RangeReport:
    """
    Day reports for an inclusive date range, sorted by date.

    Attributes
    ----------
    start : date
        First day of the range.
    end : date
        Last day of the range (inclusive).
    days : Tuple[DayReport, ...]
        Included day reports.
    """

    start: date
    end: date
    days: Tuple[DayReport, ...] = ()

    @property
    def total_duration(self) -> timedelta:
        return sum_durations(day.total_duration for day in self.days)


def group_by_project(entries: Iterable[ClosedEntry]) -> Dict[str, List[ClosedEntry]]:
    """
    Group entries by exact project name.
    """
    groups: Dict[str, List[ClosedEntry]] = defaultdict(list)
    for entry in entries:
        groups[entry.project_name].append(entry)
    return dict(groups)


class ReportCreator:
    """
    Build reports from a time log's closed entries.

    Parameters
    ----------
    time_log : TimeLog
        Log to read from; never mutated.
    """

    def __init__(self, time_log: TimeLog) -> None:
        self.time_log = time_log

    def report_day(self, day: date) -> DayReport:
        """
        Report per-project totals for one day.

        Parameters
        ----------
        day : date
            Calendar day.

        Returns
        -------
        DayReport
            Project reports sorted by name; empty for a day without entries.
        """
        groups = group_by_project(self.time_log.for_day(day))
        projects = [
            ProjectReport(
                name=name,
                duration=sum_durations(entry.duration for entry in entries),
            )
            for name, entries in groups.items()
        ]
        projects.sort(key=lambda project: project.name)
        return DayReport(date=day, projects=tuple(projects))

    def report_range(
        self,
        end_date: date,
        num_days: int,
        include_empty_days: bool = False,
    ) -> RangeReport:
        """
        Report the ``num_days`` days ending on ``end_date``.

        Parameters
        ----------
        end_date : date
            Last day of the window (inclusive).
        num_days : int
            Number of days in the window; zero gives an empty range.
        include_empty_days : bool, optional
            Keep days without entries (default: False).

        Returns
        -------
        RangeReport
            Day reports in ascending date order.

        Raises
        ------
        ValueError
            If ``num_days`` is negative or reaches before the earliest date.
        """
        if num_days < 0:
            raise ValueError("Number of days must not be negative.")
        if num_days - 1 > (end_date - date.min).days:
            raise ValueError(f"Number of days is too large: {num_days}")
        start_date = end_date - timedelta(days=num_days - 1)
        days: List[DayReport] = []
        current = start_date
        while current <= end_date:
            report = self.report_day(current)
            if include_empty_days or not report.is_empty:
                days.append(report)
            current += timedelta(days=1)
        return RangeReport(start=start_date, end=end_date, days=tuple(days))
