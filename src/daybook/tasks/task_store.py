# src/daybook/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.ports import ClockSource, MutationGuard
from .ledger import CompletionLedger
from .task_models import CompletionRecord, Note, Task, Workspace, WorkspaceCollection, new_id

logger = logging.getLogger(__name__)


class _TodayOnlyGuard:
    """Fallback guard when no navigation controller is wired: index 0 only."""

    def mutation_permitted(self, workspace: Workspace) -> bool:
        return workspace.current_index == 0

    def is_settled(self, workspace_id: str) -> bool:
        return True


class TaskStore:
    """
    In-memory task store over a WorkspaceCollection.

    Task operations act on the active workspace and only on today's note
    (notes[0]) while the guard permits it. Everything else is a no-op:
    operations return False/None instead of raising, and the state is left
    untouched.

    on_change is fired after every applied mutation (persistence hook).
    """

    def __init__(
        self,
        collection: WorkspaceCollection,
        *,
        clock: ClockSource,
        ledger: CompletionLedger,
        guard: MutationGuard | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.collection = collection
        self._clock = clock
        self._ledger = ledger
        self._guard: MutationGuard = guard or _TodayOnlyGuard()
        self._on_change = on_change

    # ---- low-level helpers ----

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _today_note(self, op: str) -> Note | None:
        ws = self.collection.active
        if not self._guard.mutation_permitted(ws):
            logger.debug(
                "%s rejected: not on today (workspace=%s index=%s)", op, ws.id, ws.current_index
            )
            return None
        return ws.latest_note

    # ---- task operations (today only) ----

    def add_task(self, text: str) -> Task | None:
        clean = (text or "").strip()
        if not clean:
            logger.debug("add_task rejected: empty text")
            return None
        note = self._today_note("add_task")
        if note is None:
            return None

        task = Task(id=new_id(), text=clean)
        note.tasks.append(task)
        logger.debug("Task added id=%s date=%s", task.id, note.date)
        self._changed()
        return task

    def edit_task(self, task_id: str, new_text: str) -> bool:
        clean = (new_text or "").strip()
        if not clean:
            logger.debug("edit_task rejected: empty text")
            return False
        note = self._today_note("edit_task")
        task = note.find(task_id) if note is not None else None
        if task is None:
            return False

        task.text = clean
        self._changed()
        return True

    def delete_task(self, task_id: str) -> bool:
        note = self._today_note("delete_task")
        task = note.find(task_id) if note is not None else None
        if note is None or task is None:
            return False

        note.tasks.remove(task)
        logger.debug("Task deleted id=%s", task_id)
        self._changed()
        return True

    def toggle_complete(self, task_id: str) -> bool:
        """
        Flip completed. false -> true appends a CompletionRecord;
        true -> false leaves the ledger alone.
        """
        note = self._today_note("toggle_complete")
        task = note.find(task_id) if note is not None else None
        if note is None or task is None:
            return False

        task.completed = not task.completed
        if task.completed:
            self._ledger.record(
                CompletionRecord(
                    task_id=task.id,
                    text=task.text,
                    completed_at=self._clock.now(),
                    completed_on=note.date,
                )
            )
        self._changed()
        return True

    def toggle_pin(self, task_id: str) -> bool:
        note = self._today_note("toggle_pin")
        task = note.find(task_id) if note is not None else None
        if task is None:
            return False

        task.pinned = not task.pinned
        self._changed()
        return True

    def reorder(self, task_id: str, target_position: int) -> bool:
        note = self._today_note("reorder")
        task = note.find(task_id) if note is not None else None
        if note is None or task is None:
            return False
        if not isinstance(target_position, int) or not 0 <= target_position < len(note.tasks):
            logger.debug("reorder rejected: bad position %r", target_position)
            return False
        if note.tasks.index(task) == target_position:
            return False

        note.tasks.remove(task)
        note.tasks.insert(target_position, task)
        self._changed()
        return True

    # ---- cross-day ----

    def copy_unfinished_to_today(self) -> list[Task]:
        """
        Duplicate every unfinished task of the viewed (past) note into today.

        Copies get fresh ids and completed=False; the pinned flag is not
        carried (a copy is a one-off pull, pinning is a per-task decision).
        Only valid while looking at a past day and not mid-transition.
        """
        ws = self.collection.active
        if ws.current_index == 0 or not self._guard.is_settled(ws.id):
            logger.debug("copy_unfinished_to_today rejected (workspace=%s)", ws.id)
            return []

        copies = [t.duplicate(keep_pin=False) for t in ws.visible_note.unfinished()]
        if copies:
            ws.latest_note.tasks.extend(copies)
            logger.info(
                "Copied %d unfinished task(s) from %s to %s",
                len(copies),
                ws.visible_note.date,
                ws.latest_note.date,
            )
            self._changed()
        return copies

    # ---- workspaces ----

    def create_workspace(self, name: str) -> Workspace:
        clean = (name or "").strip() or f"Workspace {len(self.collection.workspaces) + 1}"
        ws = Workspace.fresh(clean, self._clock.today())
        self.collection.workspaces.append(ws)
        self.collection.active_workspace_id = ws.id
        logger.info("Workspace created id=%s name=%s", ws.id, ws.name)
        self._changed()
        return ws

    def close_workspace(self, workspace_id: str) -> bool:
        idx = self.collection.index_of(workspace_id)
        if idx < 0:
            return False
        if len(self.collection.workspaces) <= 1:
            logger.debug("close_workspace rejected: last workspace")
            return False

        removed = self.collection.workspaces.pop(idx)
        if self.collection.active_workspace_id == removed.id:
            neighbour = self.collection.workspaces[max(0, idx - 1)]
            self.collection.active_workspace_id = neighbour.id
        logger.info("Workspace closed id=%s name=%s", removed.id, removed.name)
        self._changed()
        return True

    def switch_workspace(self, workspace_id: str) -> bool:
        if self.collection.get(workspace_id) is None:
            return False
        if self.collection.active_workspace_id == workspace_id:
            return False
        self.collection.active_workspace_id = workspace_id
        self._changed()
        return True

    def rename_workspace(self, workspace_id: str, name: str) -> bool:
        clean = (name or "").strip()
        ws = self.collection.get(workspace_id)
        if ws is None or not clean:
            return False
        ws.name = clean
        self._changed()
        return True
