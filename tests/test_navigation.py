# tests/test_navigation.py

from __future__ import annotations

import asyncio

import pytest

from daybook.core.state import AppState
from daybook.tasks.navigation import NavigationController
from daybook.tasks.task_models import Note, Workspace, WorkspaceCollection

from .fakes import FakeClock


def _with_days(state: AppState, clock, n: int) -> None:
    """Give the active workspace n extra past days."""
    for _ in range(n):
        clock.advance_days(1)
        clock.tick()


def test_navigate_settles_after_delay(state: AppState, clock, scheduler) -> None:
    _with_days(state, clock, 3)
    ws = state.active_workspace

    assert state.navigation.request_navigate(2)
    assert state.navigation.is_transitioning(ws.id)
    assert ws.current_index == 0
    assert scheduler.pending[0].delay == pytest.approx(0.6)

    scheduler.fire_all()
    assert ws.current_index == 2
    assert state.navigation.is_settled(ws.id)
    assert state.view().is_today is False


def test_navigate_rejections(state: AppState, clock, scheduler) -> None:
    _with_days(state, clock, 2)
    nav = state.navigation

    assert nav.request_navigate(0) is False  # unchanged
    assert nav.request_navigate(3) is False  # out of range
    assert nav.request_navigate(-1) is False

    assert nav.request_navigate(1)
    assert nav.request_navigate(2) is False  # mid-flight
    assert len(scheduler.pending) == 1

    scheduler.fire_all()
    assert state.active_workspace.current_index == 1
    assert nav.request_navigate(2)


def test_scroll_delta_single_steps_with_threshold(state: AppState, clock, scheduler) -> None:
    _with_days(state, clock, 2)
    nav = state.navigation
    ws = state.active_workspace

    assert nav.request_scroll_delta(50) is False  # must exceed threshold
    assert nav.request_scroll_delta(-400) is False  # already newest

    assert nav.request_scroll_delta(120)
    assert scheduler.pending[0].delay == pytest.approx(0.4)
    scheduler.fire_all()
    assert ws.current_index == 1

    assert nav.request_scroll_delta(900)
    scheduler.fire_all()
    assert ws.current_index == 2

    assert nav.request_scroll_delta(51) is False  # capped at oldest

    assert nav.request_scroll_delta(-51)
    scheduler.fire_all()
    assert ws.current_index == 1


def test_return_to_today(state: AppState, clock, scheduler) -> None:
    _with_days(state, clock, 2)
    nav = state.navigation
    assert nav.request_return_to_today() is False

    nav.request_navigate(2)
    scheduler.fire_all()
    assert nav.request_return_to_today()
    scheduler.fire_all()
    assert state.active_workspace.current_index == 0


def test_navigation_state_is_per_workspace(state: AppState, clock, scheduler) -> None:
    _with_days(state, clock, 1)
    first = state.active_workspace
    assert state.navigation.request_navigate(1)

    second = state.store.create_workspace("Other")
    assert state.navigation.is_settled(second.id)
    assert state.store.add_task("allowed here") is not None

    scheduler.fire_all()
    assert first.current_index == 1
    assert second.current_index == 0


def test_copy_unfinished_to_today(state: AppState, clock, scheduler) -> None:
    a = state.store.add_task("unfinished one")
    b = state.store.add_task("finished")
    c = state.store.add_task("unfinished two")
    state.store.toggle_complete(b.id)
    state.store.toggle_pin(c.id)
    _with_days(state, clock, 2)

    state.navigation.request_navigate(2)
    scheduler.fire_all()

    copies = state.copy_unfinished_to_today()
    assert copies is not None and len(copies) == 2

    ws = state.active_workspace
    today = ws.latest_note.tasks
    assert [t.text for t in today][-2:] == ["unfinished one", "unfinished two"]
    assert all(not t.completed for t in copies)
    assert all(not t.pinned for t in copies)
    assert {t.id for t in copies}.isdisjoint({a.id, c.id})

    # Heads back to today.
    assert state.navigation.is_transitioning(ws.id)
    scheduler.fire_all()
    assert ws.current_index == 0


def test_copy_unfinished_with_nothing_to_copy_still_returns(state: AppState, clock, scheduler) -> None:
    _with_days(state, clock, 1)
    state.navigation.request_navigate(1)
    scheduler.fire_all()

    assert state.copy_unfinished_to_today() == []
    scheduler.fire_all()
    assert state.active_workspace.current_index == 0


def test_copy_unfinished_rejected_on_today_or_mid_flight(state: AppState, clock, scheduler) -> None:
    state.store.add_task("x")
    assert state.copy_unfinished_to_today() is None

    _with_days(state, clock, 1)
    state.navigation.request_navigate(1)
    assert state.copy_unfinished_to_today() is None
    scheduler.fire_all()
    assert state.active_workspace.latest_note.tasks == []


def test_closing_workspace_mid_flight_is_harmless(state: AppState, clock, scheduler) -> None:
    _with_days(state, clock, 1)
    doomed = state.active_workspace
    state.store.create_workspace("Keep")
    state.store.switch_workspace(doomed.id)
    state.navigation.request_navigate(1)

    assert state.close_workspace(doomed.id)
    scheduler.fire_all()
    assert state.navigation.is_settled(doomed.id)
    assert state.active_workspace.name == "Keep"


def test_index_change_is_persisted(state: AppState, clock, scheduler, kv) -> None:
    _with_days(state, clock, 1)
    writes = kv.writes
    state.navigation.request_navigate(1)
    assert kv.writes == writes
    scheduler.fire_all()
    assert kv.writes == writes + 1


@pytest.mark.asyncio
async def test_default_scheduler_uses_asyncio_loop(clock: FakeClock) -> None:
    ws = Workspace(id="w", name="w", notes=[Note(date=clock.today()), Note(date=clock.today().replace(day=1))])
    nav = NavigationController(
        WorkspaceCollection(workspaces=[ws], active_workspace_id="w"), navigate_delay=0.01
    )

    assert nav.request_navigate(1)
    assert nav.mutation_permitted(ws) is False
    await asyncio.sleep(0.05)
    assert ws.current_index == 1
    assert nav.is_settled("w")
