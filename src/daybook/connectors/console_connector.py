# src/daybook/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState, NoteView

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def render_view(view: NoteView) -> str:
    header = f"== {view.workspace_name} / {view.label} =="
    if view.total_days > 1:
        header += f"  [{view.current_index + 1}/{view.total_days}]"
    if view.transitioning:
        header += "  (moving...)"

    lines = [header]
    for i, task in enumerate(view.tasks, start=1):
        box = "[x]" if task.completed else "[ ]"
        pin = " *" if task.pinned else ""
        lines.append(f"  {i:>2}. {box} {task.text}{pin}")
    if not view.tasks:
        lines.append(
            "  Nothing yet. Type below to begin." if view.is_today else "  No tasks this day."
        )
    if not view.is_today:
        lines.append("  (read-only: /today to go back, /copy to pull unfinished tasks)")
    return "\n".join(lines)


def handle_line(state: AppState, user_input: str) -> str | None:
    """Commands go to the registry; anything else is a new task for today."""
    try:
        reply = command_registry.handle(state, user_input)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."
    if reply is not None:
        return reply

    task = state.store.add_task(user_input)
    if task is None:
        return "Past days are read-only. Use /today to go back."
    return None


async def run_console_loop(state: AppState) -> None:
    """
    Console REPL on the asyncio loop.

    input() runs in a worker thread; the command itself runs back on the loop,
    so clock ticks and navigation settles never interleave with a command.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")
    print(render_view(state.view()))

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            print(render_view(state.view()))
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        if reply is not None:
            _print_ts(reply)
        if state.navigation.is_transitioning(state.active_workspace.id):
            # Let the move settle before redrawing.
            await asyncio.sleep(float(getattr(state.settings, "navigate_settle_seconds", 0.6)))
        print(render_view(state.view()))

    logger.info("Console connector finished.")
