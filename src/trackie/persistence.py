#!/usr/bin/env python3
"""
Locate, read and write the trackie time log file.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, Protocol

from .time_log import Clock, SnapshotError, TimeLog, TrackieError

LOG_PATH_ENV = "TRACKIE_CONFIG"


class Storage(Protocol):
    def read(self) -> Optional[str]: ...

    def write(self, content: str) -> None: ...


def default_log_path() -> Path:
    """
    Return the default time log path under the user data directory.

    Returns
    -------
    Path
        ``$XDG_DATA_HOME/trackie/trackie.json`` or the
        ``~/.local/share`` equivalent.
    """
    data_home = os.environ.get("XDG_DATA_HOME", "").strip()
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "trackie" / "trackie.json"


def legacy_log_path() -> Path:
    return Path.home() / ".config" / "trackie.json"


def get_log_path() -> Path:
    """
    Resolve the time log path.

    Returns
    -------
    Path
        ``TRACKIE_CONFIG`` when set, otherwise the default path.
    """
    override = os.environ.get(LOG_PATH_ENV, "").strip()
    if override:
        return Path(os.path.expandvars(os.path.expanduser(override)))
    return default_log_path()


def migrate_legacy_log() -> Optional[Path]:
    """
    Move a log from the legacy location to the default path.

    Nothing happens when ``TRACKIE_CONFIG`` is set or no legacy file exists.

    Returns
    -------
    Optional[Path]
        New path when a migration happened.

    Raises
    ------
    TrackieError
        If files exist at both locations.
    """
    if os.environ.get(LOG_PATH_ENV, "").strip():
        return None
    legacy_path = legacy_log_path()
    if not legacy_path.is_file():
        return None
    print("Legacy data detected. Running migration...", file=sys.stderr)
    new_path = default_log_path()
    if new_path.exists():
        raise TrackieError(
            "Failed migration detected. "
            f"Please delete either {legacy_path} or {new_path}"
        )
    new_path.parent.mkdir(parents=True, exist_ok=True)
    legacy_path.rename(new_path)
    return new_path


class FileStorage:
    """
    Time log storage backed by a single JSON file.

    Parameters
    ----------
    path : Optional[Path], optional
        File path (defaults to :func:`get_log_path`, after migrating any
        legacy file).
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        if path is None:
            migrate_legacy_log()
            path = get_log_path()
        self.path = path

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise SnapshotError(f"Time log is not valid UTF-8: {exc}") from exc

    def write(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(content, encoding="utf-8")


class MemoryStorage:
    """
    In-memory storage, mainly for tests.
    """

    def __init__(self, content: Optional[str] = None) -> None:
        self.content = content
        self.writes = 0

    def read(self) -> Optional[str]:
        return self.content

    def write(self, content: str) -> None:
        self.content = content
        self.writes += 1


def load_log(storage: Storage, *, clock: Optional[Clock] = None) -> TimeLog:
    """
    Load the time log, or an empty log if nothing was saved yet.

    Parameters
    ----------
    storage : Storage
        Storage to read from.
    clock : Optional[Clock], optional
        Clock for the loaded log.

    Returns
    -------
    TimeLog
        Loaded log.

    Raises
    ------
    SnapshotError
        If the stored snapshot is malformed.
    """
    content = storage.read()
    if content is None or not content.strip():
        return TimeLog(clock=clock) if clock else TimeLog()
    return TimeLog.from_json(content, clock=clock)


def save_log(storage: Storage, log: TimeLog) -> None:
    storage.write(log.to_json())
