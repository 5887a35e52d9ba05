# src/daybook/tasks/rollover.py

from __future__ import annotations

"""
Day rollover.

Runs on every clock tick:
- compares ClockSource.today() with the latest note of every workspace,
- for each workspace that is behind, builds a new note for today holding
  copies of the pinned, unfinished tasks of its latest note,
- commits all new notes in one step and resets current_index to 0.

Only the single current date is considered: a process that slept through
several day boundaries gets exactly one new note on resume.
"""

import logging
from collections.abc import Callable
from datetime import date

from ..core.ports import ClockSource
from .task_models import Note, Workspace, WorkspaceCollection

logger = logging.getLogger(__name__)


def carry_forward(note: Note, today: date) -> Note:
    """Next-day note: fresh copies of pinned, unfinished tasks (still pinned)."""
    carried = [t.duplicate(keep_pin=True) for t in note.tasks if t.pinned and not t.completed]
    return Note(date=today, tasks=carried)


class RolloverEngine:
    def __init__(
        self,
        collection: WorkspaceCollection,
        clock: ClockSource,
        *,
        on_rollover: Callable[[list[Workspace]], None] | None = None,
    ) -> None:
        self.collection = collection
        self._clock = clock
        self._on_rollover = on_rollover

    def _plan(self, today: date) -> list[tuple[Workspace, Note]]:
        plan: list[tuple[Workspace, Note]] = []
        for ws in self.collection.workspaces:
            if ws.has_date(today):
                continue
            latest = ws.latest_note
            if latest.date > today:
                # Clock went backwards; inserting would break date ordering.
                logger.warning(
                    "Skipping rollover for workspace=%s: latest note %s is after %s",
                    ws.id,
                    latest.date,
                    today,
                )
                continue
            plan.append((ws, carry_forward(latest, today)))
        return plan

    def check(self) -> list[Workspace]:
        """
        Tick handler. Returns the workspaces that rolled over (empty = no-op).

        The plan is computed for every workspace before anything is mutated,
        so a tick either advances all lagging workspaces or none.
        """
        today = self._clock.today()
        plan = self._plan(today)
        if not plan:
            return []

        for ws, note in plan:
            ws.notes.insert(0, note)
            ws.current_index = 0

        rolled = [ws for ws, _ in plan]
        logger.info(
            "Rollover to %s: %d workspace(s), %d task(s) carried",
            today.isoformat(),
            len(rolled),
            sum(len(note.tasks) for _, note in plan),
        )
        if self._on_rollover is not None:
            self._on_rollover(rolled)
        return rolled
