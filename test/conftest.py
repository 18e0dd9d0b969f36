"""
Shared pytest fixtures for trackie tests.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

TZ = timezone(timedelta(hours=1))


class FakeClock:
    """
    Controllable clock for time log tests.

    Parameters
    ----------
    now : datetime
        Initial time.
    """

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """
    Provide a clock starting at 2024-01-05 09:00 (+01:00).

    Returns
    -------
    FakeClock
        Clock for injection into time logs and commands.
    """
    return FakeClock(datetime(2024, 1, 5, 9, 0, 0, tzinfo=TZ))


@pytest.fixture(autouse=True)
def isolate_trackie_paths(tmp_path, monkeypatch) -> None:
    """
    Ensure tests do not read/write the real time log or settings.

    Parameters
    ----------
    tmp_path : pathlib.Path
        Temporary path provided by pytest.
    monkeypatch : pytest.MonkeyPatch
        Monkeypatch fixture for environment updates.
    """
    monkeypatch.setenv("TRACKIE_CONFIG", str(tmp_path / "trackie.json"))
    monkeypatch.setenv("TRACKIE_SETTINGS_PATH", str(tmp_path / "settings.toml"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
