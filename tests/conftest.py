# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from daybook.core.state import AppState

from .fakes import FakeClock, ManualScheduler, MemoryKV


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="daybook-test",
        data_dir=tmp_path,
        state_db_path=tmp_path / "daybook.sqlite3",
        tick_interval_seconds=60.0,
        scroll_threshold=50.0,
        navigate_settle_seconds=0.6,
        scroll_settle_seconds=0.4,
        console_enabled=False,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def kv() -> MemoryKV:
    return MemoryKV()


@pytest.fixture()
def state(settings, clock, scheduler, kv) -> AppState:
    """AppState wired with a fake clock, a manual scheduler and in-memory storage."""
    return AppState(settings, clock=clock, kv=kv, scheduler=scheduler)
