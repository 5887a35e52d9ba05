# tests/test_rollover.py

from __future__ import annotations

import asyncio
from datetime import date, timedelta

import pytest

from daybook.clock import SystemClock
from daybook.core.state import AppState
from daybook.tasks.rollover import RolloverEngine, carry_forward
from daybook.tasks.task_models import Note, Task, Workspace, WorkspaceCollection

from .fakes import FakeClock


def _dates(ws: Workspace) -> list[date]:
    return [n.date for n in ws.notes]


def test_pinned_unfinished_tasks_are_carried_with_new_ids(state: AppState, clock) -> None:
    keep = state.store.add_task("keep going")
    done = state.store.add_task("pinned but done")
    loose = state.store.add_task("not pinned")
    state.store.toggle_pin(keep.id)
    state.store.toggle_pin(done.id)
    state.store.toggle_complete(done.id)

    clock.advance_days(1)
    clock.tick()

    ws = state.active_workspace
    assert _dates(ws) == [clock.today(), clock.today() - timedelta(days=1)]
    carried = ws.latest_note.tasks
    assert len(carried) == 1
    assert carried[0].text == "keep going"
    assert carried[0].id != keep.id
    assert carried[0].completed is False
    assert carried[0].pinned is True
    # Yesterday is untouched.
    assert [t.id for t in ws.notes[1].tasks] == [keep.id, done.id, loose.id]


def test_rollover_is_idempotent_within_a_day(state: AppState, clock) -> None:
    clock.advance_days(1)
    clock.tick()
    clock.tick()
    assert len(state.active_workspace.notes) == 2
    assert state.rollover.check() == []
    assert len(state.active_workspace.notes) == 2


def test_rollover_advances_every_workspace_and_resets_index(state: AppState, clock, scheduler) -> None:
    clock.advance_days(1)
    clock.tick()
    other = state.store.create_workspace("Side")  # born today: nothing to roll
    state.store.switch_workspace(state.collection.workspaces[0].id)
    state.navigation.request_navigate(1)
    scheduler.fire_all()
    assert state.active_workspace.current_index == 1

    clock.advance_days(1)
    rolled = state.rollover.check()

    assert {ws.id for ws in rolled} == {ws.id for ws in state.collection.workspaces}
    for ws in state.collection.workspaces:
        assert ws.latest_note.date == clock.today()
        assert ws.current_index == 0
        assert len(set(_dates(ws))) == len(ws.notes)
    assert len(other.notes) == 2


def test_rollover_skips_workspaces_already_on_today(clock: FakeClock) -> None:
    today = clock.today()
    behind = Workspace(id="a", name="a", notes=[Note(date=today - timedelta(days=1))])
    current = Workspace(id="b", name="b", notes=[Note(date=today)])
    engine = RolloverEngine(
        WorkspaceCollection(workspaces=[behind, current], active_workspace_id="a"), clock
    )

    assert engine.check() == [behind]
    assert _dates(current) == [today]
    assert _dates(behind)[0] == today


def test_dormancy_collapses_to_one_rollover(state: AppState, clock) -> None:
    task = state.store.add_task("long-running")
    state.store.toggle_pin(task.id)
    start = clock.today()

    clock.advance_days(5)
    clock.tick()

    ws = state.active_workspace
    assert _dates(ws) == [start + timedelta(days=5), start]
    assert [t.text for t in ws.latest_note.tasks] == ["long-running"]


def test_clock_going_backwards_is_ignored(clock: FakeClock) -> None:
    today = clock.today()
    ws = Workspace(id="a", name="a", notes=[Note(date=today + timedelta(days=1))])
    engine = RolloverEngine(WorkspaceCollection(workspaces=[ws], active_workspace_id="a"), clock)
    assert engine.check() == []
    assert len(ws.notes) == 1


def test_rollover_drops_pending_navigation(state: AppState, clock, scheduler) -> None:
    clock.advance_days(1)
    clock.tick()
    assert state.navigation.request_navigate(1)

    clock.advance_days(1)
    clock.tick()
    scheduler.fire_all()

    ws = state.active_workspace
    assert ws.current_index == 0
    assert state.navigation.is_settled(ws.id)


def test_carried_task_keeps_carrying_until_done(state: AppState, clock) -> None:
    task = state.store.add_task("habit")
    state.store.toggle_pin(task.id)
    clock.advance_days(1)
    clock.tick()
    carried = state.active_workspace.latest_note.tasks[0]
    state.store.toggle_complete(carried.id)

    clock.advance_days(1)
    clock.tick()
    assert state.active_workspace.latest_note.tasks == []


@pytest.mark.asyncio
async def test_system_clock_loop_fires_subscribers() -> None:
    clock = SystemClock()
    calls: list[int] = []

    def boom() -> None:
        raise RuntimeError("subscriber failure")

    clock.on_tick(boom)
    clock.on_tick(lambda: calls.append(1))

    runner = asyncio.create_task(clock.run(interval_seconds=0.01))
    await asyncio.sleep(0.05)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert calls, "Clock should tick at least once"
    assert clock.today() == date.today()


def test_fresh_task_is_not_carried_by_default() -> None:
    note = Note(date=date(2024, 1, 1), tasks=[Task(id="1", text="x")])
    assert carry_forward(note, date(2024, 1, 2)).tasks == []
