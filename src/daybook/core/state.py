# src/daybook/core/state.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from ..storage.gateway import PersistenceGateway
from ..tasks.ledger import CompletionLedger
from ..tasks.navigation import NavigationController
from ..tasks.rollover import RolloverEngine
from ..tasks.task_models import Task, Workspace, WorkspaceCollection
from ..tasks.task_store import TaskStore
from .ports import ClockSource, KeyValueStore, Scheduler

logger = logging.getLogger(__name__)


def date_label(day: date, today: date) -> str:
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


@dataclass(frozen=True, slots=True)
class NoteView:
    """Read-only projection of the visible note for the presentation layer."""

    workspace_id: str
    workspace_name: str
    date: date
    label: str
    tasks: tuple[Task, ...]
    is_today: bool
    transitioning: bool
    current_index: int
    total_days: int


class AppState:
    """
    Composition of the core: store, rollover, navigation, ledger, persistence.

    Every state change funnels into persist(). Saving is fire-and-forget:
    a failed write is logged, the in-memory change stands.
    """

    def __init__(
        self,
        settings: object,
        *,
        clock: ClockSource,
        kv: KeyValueStore,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.settings = settings
        self.clock = clock
        self.gateway = PersistenceGateway(kv, clock)

        loaded = self.gateway.load()
        self.collection: WorkspaceCollection = loaded.collection
        self.ledger: CompletionLedger = loaded.ledger

        self.navigation = NavigationController(
            self.collection,
            scheduler=scheduler,
            navigate_delay=getattr(settings, "navigate_settle_seconds", 0.6),
            scroll_delay=getattr(settings, "scroll_settle_seconds", 0.4),
            scroll_threshold=getattr(settings, "scroll_threshold", 50.0),
            on_change=self.persist,
        )
        self.store = TaskStore(
            self.collection,
            clock=clock,
            ledger=self.ledger,
            guard=self.navigation,
            on_change=self.persist,
        )
        self.rollover = RolloverEngine(self.collection, clock, on_rollover=self._handle_rollover)
        clock.on_tick(self.rollover.check)

        if loaded.migrated or loaded.repaired:
            self.persist()

    # ---- persistence ----

    def persist(self) -> None:
        try:
            self.gateway.save(self.collection, self.ledger)
        except Exception:
            logger.exception("Failed to save state")

    def _handle_rollover(self, rolled: list[Workspace]) -> None:
        for ws in rolled:
            self.navigation.reset(ws.id)
        self.persist()

    # ---- cross-component operations ----

    def copy_unfinished_to_today(self) -> list[Task] | None:
        """
        Pull unfinished tasks of the viewed past day into today, then head
        back to today (also when there was nothing to copy).

        None means rejected (already on today, or mid-transition).
        """
        ws = self.collection.active
        if ws.current_index == 0 or self.navigation.is_transitioning(ws.id):
            return None
        copies = self.store.copy_unfinished_to_today()
        self.navigation.request_return_to_today()
        return copies

    def close_workspace(self, workspace_id: str) -> bool:
        if not self.store.close_workspace(workspace_id):
            return False
        self.navigation.reset(workspace_id)
        return True

    # ---- read projections ----

    @property
    def active_workspace(self) -> Workspace:
        return self.collection.active

    def view(self) -> NoteView:
        ws = self.collection.active
        note = ws.visible_note
        return NoteView(
            workspace_id=ws.id,
            workspace_name=ws.name,
            date=note.date,
            label=date_label(note.date, self.clock.today()),
            tasks=tuple(note.tasks),
            is_today=ws.is_today,
            transitioning=self.navigation.is_transitioning(ws.id),
            current_index=ws.current_index,
            total_days=len(ws.notes),
        )
