#!/usr/bin/env python3
"""
Load user settings for trackie commands.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import tomllib

SETTINGS_PATH_ENV = "TRACKIE_SETTINGS_PATH"
DEFAULT_REPORT_DAYS = 5
DEFAULT_STATUS_FORMAT = "Tracking %p since %t (%D)"
DEFAULT_EMPTY_STATUS_MSG = "Currently not tracking any time."


@dataclass(frozen=True)
class Settings:
    """
    Defaults applied when CLI options are omitted.

    Attributes
    ----------
    report_days : int
        Days included in a report.
    include_empty_days : bool
        Whether reports list days without entries.
    status_format : str
        Status line template (``%p``, ``%d``, ``%t``, ``%D``).
    status_fallback : str
        Message printed by status when nothing is tracked.
    """

    report_days: int = DEFAULT_REPORT_DAYS
    include_empty_days: bool = False
    status_format: str = DEFAULT_STATUS_FORMAT
    status_fallback: str = DEFAULT_EMPTY_STATUS_MSG


def get_settings_path() -> Path:
    """
    Return the settings file path.

    Returns
    -------
    Path
        Settings TOML path.

    Examples
    --------
    >>> isinstance(get_settings_path(), Path)
    True
    """
    override = os.environ.get(SETTINGS_PATH_ENV, "").strip()
    if override:
        return Path(os.path.expandvars(os.path.expanduser(override)))
    return Path.home() / ".config" / "trackie" / "settings.toml"


def _section(parsed: Dict[str, Any], name: str) -> Dict[str, Any]:
    raw = parsed.get(name)
    return raw if isinstance(raw, dict) else {}


def _non_negative_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return default
    return value


def _text(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from disk.

    Parameters
    ----------
    path : Optional[Path], optional
        Path to the settings file (defaults to standard path).

    Returns
    -------
    Settings
        Parsed settings; defaults for a missing file or invalid values.
    """
    settings_path = path or get_settings_path()
    if not settings_path.exists():
        return Settings()
    try:
        parsed = tomllib.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return Settings()
    report = _section(parsed, "report")
    status = _section(parsed, "status")
    include_empty = report.get("include_empty_days")
    return Settings(
        report_days=_non_negative_int(report.get("days"), DEFAULT_REPORT_DAYS),
        include_empty_days=include_empty if isinstance(include_empty, bool) else False,
        status_format=_text(status.get("format"), DEFAULT_STATUS_FORMAT),
        status_fallback=_text(status.get("fallback"), DEFAULT_EMPTY_STATUS_MSG),
    )
