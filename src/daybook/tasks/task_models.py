# src/daybook/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime


def new_id() -> str:
    """Mint an opaque unique id (tasks, workspaces)."""
    return uuid.uuid4().hex


@dataclass(slots=True)
class Task:
    id: str
    text: str
    completed: bool = False
    pinned: bool = False

    def duplicate(self, *, keep_pin: bool) -> Task:
        """
        Copy into a new entity: fresh id, never completed.

        Carried/copied tasks are new tasks, not the same task relocated.
        """
        return Task(id=new_id(), text=self.text, completed=False, pinned=self.pinned and keep_pin)


@dataclass(slots=True)
class Note:
    """Tasks for one calendar date. List order is display/priority order."""

    date: date
    tasks: list[Task] = field(default_factory=list)

    def find(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def unfinished(self) -> list[Task]:
        return [t for t in self.tasks if not t.completed]


@dataclass(slots=True)
class Workspace:
    """
    Independent named task list.

    notes are ordered by date descending: notes[0] is the most recent day
    ("today" once rollover has run). current_index is the visible note.
    """

    id: str
    name: str
    notes: list[Note]
    current_index: int = 0

    @property
    def latest_note(self) -> Note:
        return self.notes[0]

    @property
    def visible_note(self) -> Note:
        return self.notes[self.current_index]

    @property
    def is_today(self) -> bool:
        return self.current_index == 0

    def has_date(self, day: date) -> bool:
        return any(n.date == day for n in self.notes)

    @staticmethod
    def fresh(name: str, today: date) -> Workspace:
        return Workspace(id=new_id(), name=name, notes=[Note(date=today)], current_index=0)


@dataclass(slots=True)
class WorkspaceCollection:
    """Ordered workspaces (display order) + the active one. Never empty."""

    workspaces: list[Workspace]
    active_workspace_id: str

    def get(self, workspace_id: str) -> Workspace | None:
        for ws in self.workspaces:
            if ws.id == workspace_id:
                return ws
        return None

    def index_of(self, workspace_id: str) -> int:
        for i, ws in enumerate(self.workspaces):
            if ws.id == workspace_id:
                return i
        return -1

    @property
    def active(self) -> Workspace:
        ws = self.get(self.active_workspace_id)
        return ws if ws is not None else self.workspaces[0]


@dataclass(frozen=True, slots=True)
class CompletionRecord:
    """
    One completion event. Snapshot of the task text at completion time.

    Outlives the task and note it came from.
    """

    task_id: str
    text: str
    completed_at: datetime
    completed_on: date
