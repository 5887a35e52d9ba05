# src/daybook/clock.py

from __future__ import annotations

"""
System clock.

today() is the local calendar date. Tick subscribers are fired by run(), a
small polling loop; to stop it, cancel the coroutine/task.
"""

import asyncio
import logging
from datetime import date, datetime

from .core.ports import TickCallback

logger = logging.getLogger(__name__)


class SystemClock:
    def __init__(self) -> None:
        self._subscribers: list[TickCallback] = []

    def today(self) -> date:
        return date.today()

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def on_tick(self, callback: TickCallback) -> None:
        self._subscribers.append(callback)

    def tick(self) -> None:
        """Fire every subscriber once; a failing subscriber does not stop the others."""
        for cb in list(self._subscribers):
            try:
                cb()
            except Exception:
                logger.exception("tick subscriber failed: %r", cb)

    async def run(self, *, interval_seconds: float = 60.0) -> None:
        sleep_s = max(0.01, float(interval_seconds))
        logger.info("Clock started (interval=%.1fs, today=%s)", sleep_s, self.today())
        while True:
            await asyncio.sleep(sleep_s)
            logger.debug("tick today=%s", self.today())
            self.tick()
