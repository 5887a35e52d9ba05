# src/daybook/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (SQLite store, system clock) into AppState.
"""

from __future__ import annotations

import logging

from ..clock import SystemClock
from ..config import get_settings
from ..core.ports import ClockSource
from ..core.state import AppState
from ..storage.kv_store import SQLiteKVStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.state_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, clock: ClockSource | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    state = AppState(
        settings,
        clock=clock or SystemClock(),
        kv=SQLiteKVStore(settings.state_db_path),
    )
    ws = state.active_workspace
    logger.info(
        "State loaded: %d workspace(s), active=%s, %d day(s), %d completion(s)",
        len(state.collection.workspaces),
        ws.name,
        len(ws.notes),
        len(state.ledger),
    )
    return state
