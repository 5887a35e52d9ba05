# src/daybook/tasks/navigation.py

from __future__ import annotations

"""
Day navigation.

Per workspace there are two states:
- Settled: index fixed, navigation and today-only mutations accepted
- Transitioning: a move is in flight; new requests are rejected, not queued

A request enters Transitioning and schedules the settle callback after a
fixed delay; the callback writes current_index and returns to Settled.
There is no cancel: a pending move always resolves, except when a rollover
or workspace close resets the workspace (the stale callback is then ignored).
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..core.ports import Scheduler
from .task_models import Workspace, WorkspaceCollection

logger = logging.getLogger(__name__)


class AsyncioScheduler:
    """Scheduler backed by the running asyncio loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


@dataclass(slots=True)
class _Transition:
    target: int
    handle: Any = None


class NavigationController:
    def __init__(
        self,
        collection: WorkspaceCollection,
        *,
        scheduler: Scheduler | None = None,
        navigate_delay: float = 0.6,
        scroll_delay: float = 0.4,
        scroll_threshold: float = 50.0,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.collection = collection
        self._scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._navigate_delay = float(navigate_delay)
        self._scroll_delay = float(scroll_delay)
        self._scroll_threshold = float(scroll_threshold)
        self._on_change = on_change
        self._inflight: dict[str, _Transition] = {}

    # ---- state queries (MutationGuard) ----

    def is_transitioning(self, workspace_id: str) -> bool:
        return workspace_id in self._inflight

    def is_settled(self, workspace_id: str) -> bool:
        return workspace_id not in self._inflight

    def mutation_permitted(self, workspace: Workspace) -> bool:
        return workspace.current_index == 0 and self.is_settled(workspace.id)

    # ---- requests (active workspace) ----

    def request_navigate(self, target_index: int, *, delay: float | None = None) -> bool:
        ws = self.collection.active
        if self.is_transitioning(ws.id):
            logger.debug("navigate rejected: transitioning (workspace=%s)", ws.id)
            return False
        if not isinstance(target_index, int) or not 0 <= target_index < len(ws.notes):
            logger.debug("navigate rejected: index %r out of range", target_index)
            return False
        if target_index == ws.current_index:
            return False

        transition = _Transition(target=target_index)
        self._inflight[ws.id] = transition
        wait = self._navigate_delay if delay is None else delay
        transition.handle = self._scheduler.call_later(
            wait, lambda: self._settle(ws.id, transition)
        )
        logger.debug(
            "navigate workspace=%s %s -> %s (settle in %.2fs)",
            ws.id,
            ws.current_index,
            target_index,
            wait,
        )
        return True

    def request_scroll_delta(self, delta: float) -> bool:
        """
        One step per gesture: positive = older, negative = newer.

        |delta| must exceed the threshold; steps stop at both ends.
        """
        if abs(delta) <= self._scroll_threshold:
            return False
        ws = self.collection.active
        if delta > 0:
            target = min(ws.current_index + 1, len(ws.notes) - 1)
        else:
            target = max(ws.current_index - 1, 0)
        return self.request_navigate(target, delay=self._scroll_delay)

    def request_return_to_today(self) -> bool:
        return self.request_navigate(0)

    # ---- lifecycle ----

    def reset(self, workspace_id: str) -> None:
        """Drop any in-flight move for the workspace (rollover, close)."""
        transition = self._inflight.pop(workspace_id, None)
        if transition is None:
            return
        cancel = getattr(transition.handle, "cancel", None)
        if callable(cancel):
            cancel()
        logger.debug("navigation reset workspace=%s", workspace_id)

    def _settle(self, workspace_id: str, transition: _Transition) -> None:
        if self._inflight.get(workspace_id) is not transition:
            return
        del self._inflight[workspace_id]

        ws = self.collection.get(workspace_id)
        if ws is None or transition.target >= len(ws.notes):
            return
        ws.current_index = transition.target
        if self._on_change is not None:
            self._on_change()
