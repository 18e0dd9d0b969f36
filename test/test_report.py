"""
Tests for report aggregation.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

import trackie.report as report
from trackie.time_log import ClosedEntry, TimeLog

TZ = timezone(timedelta(hours=1))


def make_entry(day: int, minutes: int, name: str) -> ClosedEntry:
    start = datetime(2000, 1, day, 4, 0, 20, tzinfo=TZ)
    return ClosedEntry(project_name=name, start=start, end=start + timedelta(minutes=minutes))


def two_day_log() -> TimeLog:
    return TimeLog(
        entries_by_day={
            date(2000, 1, 1): [make_entry(1, 30, "Foo"), make_entry(1, 10, "Bar")],
            date(2000, 1, 2): [make_entry(2, 10, "Bar")],
        }
    )


@pytest.mark.unit
def test_report_day_on_empty_log():
    """
    Ensure a day without entries reports zero.

    Returns
    -------
    None
        This test asserts the empty day report.
    """
    creator = report.ReportCreator(TimeLog())

    day = creator.report_day(date(2024, 3, 1))

    assert day.date == date(2024, 3, 1)
    assert day.projects == ()
    assert day.total_duration == timedelta(0)
    assert day.is_empty


@pytest.mark.unit
def test_report_day_sums_same_project():
    """
    Ensure entries of one project are summed into one project report.

    Returns
    -------
    None
        This test asserts per-project summing.
    """
    log = TimeLog(
        entries_by_day={date(2000, 1, 1): [make_entry(1, 30, "Foo"), make_entry(1, 10, "Foo")]}
    )

    day = report.ReportCreator(log).report_day(date(2000, 1, 1))

    assert day.projects == (report.ProjectReport("Foo", timedelta(minutes=40)),)
    assert day.total_duration == timedelta(minutes=40)


@pytest.mark.unit
def test_report_day_sorts_projects_by_name():
    """
    Ensure project reports are sorted by name.

    Returns
    -------
    None
        This test asserts deterministic project ordering.
    """
    log = TimeLog(
        entries_by_day={
            date(2000, 1, 1): [
                make_entry(1, 30, "Foo"),
                make_entry(1, 10, "Bar"),
                make_entry(1, 5, "bar"),
                make_entry(1, 15, "Bar"),
            ]
        }
    )

    day = report.ReportCreator(log).report_day(date(2000, 1, 1))

    assert [(project.name, project.duration) for project in day.projects] == [
        ("Bar", timedelta(minutes=25)),
        ("Foo", timedelta(minutes=30)),
        ("bar", timedelta(minutes=5)),
    ]
    assert day.total_duration == timedelta(minutes=60)


@pytest.mark.unit
def test_report_range_includes_empty_days_when_requested():
    """
    Ensure empty days are kept when requested.

    Returns
    -------
    None
        This test asserts empty day inclusion.
    """
    log = TimeLog(entries_by_day={date(2000, 1, 2): [make_entry(2, 30, "Foo")]})

    rng = report.ReportCreator(log).report_range(date(2000, 1, 2), 2, True)

    assert rng.start == date(2000, 1, 1)
    assert rng.end == date(2000, 1, 2)
    assert [day.date for day in rng.days] == [date(2000, 1, 1), date(2000, 1, 2)]
    assert rng.days[0].is_empty
    assert rng.total_duration == rng.days[1].total_duration == timedelta(minutes=30)


@pytest.mark.unit
def test_report_range_skips_empty_days_by_default():
    """
    Ensure empty days are dropped unless requested.

    Returns
    -------
    None
        This test asserts empty day filtering.
    """
    log = TimeLog(entries_by_day={date(2000, 1, 2): [make_entry(2, 30, "Foo")]})

    rng = report.ReportCreator(log).report_range(date(2000, 1, 3), 5)

    assert rng.start == date(1999, 12, 30)
    assert [day.date for day in rng.days] == [date(2000, 1, 2)]


@pytest.mark.parametrize("include_empty", [False, True])
@pytest.mark.unit
def test_report_range_zero_days_is_empty(include_empty):
    """
    Ensure a zero-day window yields no days.

    Parameters
    ----------
    include_empty : bool
        Empty day flag, irrelevant for a zero-day window.

    Returns
    -------
    None
        This test asserts the zero-day edge case.
    """
    rng = report.ReportCreator(two_day_log()).report_range(date(2000, 1, 1), 0, include_empty)

    assert rng.days == ()
    assert rng.total_duration == timedelta(0)


@pytest.mark.unit
def test_report_range_single_day():
    """
    Ensure a one-day window reports exactly the end date.

    Returns
    -------
    None
        This test asserts the one-day window.
    """
    rng = report.ReportCreator(two_day_log()).report_range(date(2000, 1, 1), 1, True)

    assert [day.date for day in rng.days] == [date(2000, 1, 1)]


@pytest.mark.unit
def test_report_range_sums_over_days():
    """
    Ensure range totals add up all included days.

    Returns
    -------
    None
        This test asserts range summing.
    """
    rng = report.ReportCreator(two_day_log()).report_range(date(2000, 1, 2), 2, True)

    assert len(rng.days) == 2
    assert rng.total_duration == timedelta(minutes=50)
    assert [day.total_duration for day in rng.days] == [
        timedelta(minutes=40),
        timedelta(minutes=10),
    ]


@pytest.mark.unit
def test_report_range_rejects_negative_days():
    """
    Ensure negative windows are rejected.

    Returns
    -------
    None
        This test asserts input validation.
    """
    with pytest.raises(ValueError):
        report.ReportCreator(TimeLog()).report_range(date(2000, 1, 1), -1)


@pytest.mark.unit
def test_report_does_not_mutate_log():
    """
    Ensure reporting leaves the log untouched.

    Returns
    -------
    None
        This test asserts reports are read-only.
    """
    log = two_day_log()
    before = log.to_snapshot()

    report.ReportCreator(log).report_range(date(2000, 1, 5), 10, True)

    assert log.to_snapshot() == before
    assert log.days() == [date(2000, 1, 1), date(2000, 1, 2)]


@pytest.mark.unit
def test_report_doctest_examples():
    """
    Run doctest examples embedded in report docstrings.

    Returns
    -------
    None
        This test asserts that doctest examples succeed.
    """
    import doctest

    results = doctest.testmod(report)
    assert results.failed == 0


@pytest.mark.unit
def test_report_range_rejects_window_before_earliest_date():
    """
    Ensure windows reaching before the first representable date are rejected.

    Returns
    -------
    None
        This test asserts oversized windows fail with ValueError.
    """
    creator = report.ReportCreator(TimeLog())

    with pytest.raises(ValueError, match="too large"):
        creator.report_range(date(2024, 1, 5), 1_000_000, True)

    rng = creator.report_range(date(1, 1, 3), 3, True)
    assert rng.start == date.min
    assert len(rng.days) == 3
