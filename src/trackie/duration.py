#!/usr/bin/env python3
"""
Duration helpers shared by status output and reports.
"""

from __future__ import annotations

from datetime import timedelta

MINUTES_PER_HOUR = 60


def duration_minutes(value: timedelta) -> int:
    """
    Return the whole minutes in a duration, truncating seconds.

    Parameters
    ----------
    value : timedelta
        Duration to convert.

    Returns
    -------
    int
        Whole minutes.

    Examples
    --------
    >>> duration_minutes(timedelta(minutes=90, seconds=59))
    90
    """
    return int(value.total_seconds() / 60)


def format_duration(value: timedelta) -> str:
    """
    Format a duration as zero-padded hours and minutes.

    Parameters
    ----------
    value : timedelta
        Duration to format.

    Returns
    -------
    str
        Duration such as ``"02h 05m"``.

    Examples
    --------
    >>> format_duration(timedelta(minutes=125))
    '02h 05m'
    >>> format_duration(timedelta(0))
    '00h 00m'
    >>> format_duration(timedelta(hours=26, minutes=3))
    '26h 03m'
    """
    total_minutes = duration_minutes(value)
    hours = int(total_minutes / MINUTES_PER_HOUR)
    minutes = total_minutes - hours * MINUTES_PER_HOUR
    return f"{hours:02d}h {minutes:02d}m"
