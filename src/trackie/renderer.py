#!/usr/bin/env python3
"""
Text and structured rendering of trackie reports.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

import typer

from .duration import duration_minutes, format_duration
from .report import DayReport, ProjectReport, RangeReport

ARROW = "❯"
DAY_PADDING = 25
PROJECT_WIDTH = 35


def format_day_line(day: DayReport, *, color: bool = True) -> str:
    """
    Format the heading line for a day.

    Parameters
    ----------
    day : DayReport
        Day to format.
    color : bool, optional
        Style the marker with ANSI colour (default: True).

    Returns
    -------
    str
        Line such as ``"❯ Mon. 2024-01-01   ... [01h 30m]"``.
    """
    marker = typer.style(ARROW, fg=typer.colors.GREEN) if color else ARROW
    label = day.date.strftime("%a. %Y-%m-%d")
    padding = " " * DAY_PADDING
    return f"{marker} {label}{padding}[{format_duration(day.total_duration)}]"


def format_project_line(project: ProjectReport, *, color: bool = True) -> str:
    name = typer.style(project.name, bold=True) if color else project.name
    padding = " " * max(0, PROJECT_WIDTH - len(project.name))
    return f"    {ARROW} {name}{padding} [{format_duration(project.duration)}]"


def render_text(report: RangeReport, *, color: bool = True) -> str:
    """
    Render a range report as indented text.

    Only day and project lines are printed; the range itself has no line.

    Parameters
    ----------
    report : RangeReport
        Report to render.
    color : bool, optional
        Use ANSI styling (default: True).

    Returns
    -------
    str
        Rendered text, one line per day and per project.
    """
    lines: List[str] = []
    for day in report.days:
        lines.append(format_day_line(day, color=color))
        for project in day.projects:
            lines.append(format_project_line(project, color=color))
    return "\n".join(lines)


def to_structured(report: RangeReport) -> Dict[str, Any]:
    """
    Convert a range report to a JSON-ready tree.

    Durations become integer minutes and dates ISO calendar dates.

    Parameters
    ----------
    report : RangeReport
        Report to convert.

    Returns
    -------
    Dict[str, Any]
        Tree with ``start``, ``end``, ``total`` and ``days``.
    """
    return {
        "start": report.start.isoformat(),
        "end": report.end.isoformat(),
        "total": duration_minutes(report.total_duration),
        "days": [
            {
                "date": day.date.isoformat(),
                "total": duration_minutes(day.total_duration),
                "projects": [
                    {
                        "project": project.name,
                        "duration": duration_minutes(project.duration),
                    }
                    for project in day.projects
                ],
            }
            for day in report.days
        ],
    }


def render_json(report: RangeReport) -> str:
    return json.dumps(to_structured(report), indent=2, ensure_ascii=False)
