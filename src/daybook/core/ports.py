# src/daybook/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the clock, timers and durable storage swappable and makes testing
deterministic (fake clock, manual scheduler, in-memory key-value store).
"""

from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any, Protocol

TickCallback = Callable[[], None]


class ClockSource(Protocol):
    """Current calendar date (local time zone) plus a periodic tick."""

    def today(self) -> date: ...
    def now(self) -> datetime: ...
    def on_tick(self, callback: TickCallback) -> None: ...


class Scheduler(Protocol):
    """
    Timed callbacks for the navigation settle delay.

    Returns a handle with .cancel() (asyncio.TimerHandle-compatible).
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> Any: ...


class KeyValueStore(Protocol):
    """Durable string key -> string value storage."""

    def get(self, key: str) -> str | None: ...
    def set_many(self, items: Mapping[str, str]) -> None: ...


class MutationGuard(Protocol):
    """Decides whether today-only mutations may touch a workspace right now."""

    def mutation_permitted(self, workspace: Any) -> bool: ...
    def is_settled(self, workspace_id: str) -> bool: ...
