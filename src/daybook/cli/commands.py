# src/daybook/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_models import Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

NOT_TODAY = "Past days are read-only. Use /today to go back."


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /done, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            logger.debug("Unknown command /%s", name)
            return f"Unknown command: /{name}. Use /help to list available commands."
        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  (plain text adds a task to today)")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _parse_int(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None


def _visible_task(state: AppState, raw: str) -> Task | None:
    """Resolve a 1-based position in the visible note."""
    n = _parse_int(raw)
    tasks = state.active_workspace.visible_note.tasks
    if n is None or not 1 <= n <= len(tasks):
        return None
    return tasks[n - 1]


def _task_op(state: AppState, args: list[str], usage: str, op: Callable[[Task], bool], ok: str) -> str:
    if not args:
        return usage
    task = _visible_task(state, args[0])
    if task is None:
        return f"No task #{args[0]}."
    if not op(task):
        return NOT_TODAY
    return f"{ok}: {task.text}"


def _workspace_by_number(state: AppState, raw: str):
    n = _parse_int(raw)
    workspaces = state.collection.workspaces
    if n is None or not 1 <= n <= len(workspaces):
        return None
    return workspaces[n - 1]


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    view = state.view()
    nav = "moving" if view.transitioning else "settled"
    return (
        "Status:\n"
        f"  Workspace: {view.workspace_name} ({len(state.collection.workspaces)} open)\n"
        f"  Showing: {view.label} (day {view.current_index + 1} of {view.total_days}, {nav})\n"
        f"  Completions logged: {len(state.ledger)}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    text = " ".join(args)
    if not text.strip():
        return "Usage: /add <text>"
    task = state.store.add_task(text)
    if task is None:
        return NOT_TODAY
    return f"Added: {task.text}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <n> <new text>"
    text = " ".join(args[1:])
    return _task_op(state, args, "", lambda t: state.store.edit_task(t.id, text), "Edited")


def cmd_done(state: AppState, args: list[str]) -> str:
    return _task_op(
        state,
        args,
        "Usage: /done <n>",
        lambda t: state.store.toggle_complete(t.id),
        "Toggled",
    )


def cmd_pin(state: AppState, args: list[str]) -> str:
    return _task_op(
        state,
        args,
        "Usage: /pin <n>",
        lambda t: state.store.toggle_pin(t.id),
        "Pin toggled",
    )


def cmd_del(state: AppState, args: list[str]) -> str:
    return _task_op(
        state,
        args,
        "Usage: /del <n>",
        lambda t: state.store.delete_task(t.id),
        "Deleted",
    )


def cmd_move(state: AppState, args: list[str]) -> str:
    if len(args) < 2 or _parse_int(args[1]) is None:
        return "Usage: /move <n> <position>"
    pos = int(args[1]) - 1
    task = _visible_task(state, args[0])
    if task is None:
        return f"No task #{args[0]}."
    if not state.store.reorder(task.id, pos):
        return "Nothing moved."
    return f"Moved to #{pos + 1}: {task.text}"


def _scroll(state: AppState, sign: int) -> str:
    delta = sign * (float(getattr(state.settings, "scroll_threshold", 50.0)) + 1.0)
    if not state.navigation.request_scroll_delta(delta):
        return "Can't go further that way right now."
    return "..."


def cmd_older(state: AppState, args: list[str]) -> str:
    return _scroll(state, +1)


def cmd_newer(state: AppState, args: list[str]) -> str:
    return _scroll(state, -1)


def cmd_go(state: AppState, args: list[str]) -> str:
    """/go <n> -> jump to day n (0 = today, 1 = the day before, ...)"""
    n = _parse_int(args[0]) if args else None
    if n is None:
        return "Usage: /go <days back>"
    if not state.navigation.request_navigate(n):
        return "Can't go there right now."
    return "..."


def cmd_today(state: AppState, args: list[str]) -> str:
    if state.active_workspace.is_today:
        return "Already on today."
    if not state.navigation.request_return_to_today():
        return "Busy, try again."
    return "Back to today..."


def cmd_copy(state: AppState, args: list[str]) -> str:
    copies = state.copy_unfinished_to_today()
    if copies is None:
        return "Open a past day first (/older or /go <n>)."
    if not copies:
        return "No unfinished tasks there. Back to today..."
    return f"Copied {len(copies)} unfinished task(s) to today."


def cmd_ws(state: AppState, args: list[str]) -> str:
    """
    /ws                    -> list workspaces
    /ws new <name>         -> create + switch
    /ws use <n>            -> switch
    /ws rename <n> <name>  -> rename
    /ws close <n> yes      -> close (needs explicit "yes")
    """
    sub = args[0].lower() if args else "list"

    if sub == "list":
        lines = ["Workspaces:"]
        for i, ws in enumerate(state.collection.workspaces, start=1):
            mark = "*" if ws.id == state.active_workspace.id else " "
            lines.append(f" {mark}{i}. {ws.name} ({len(ws.notes)} day(s))")
        return "\n".join(lines)

    if sub == "new":
        ws = state.store.create_workspace(" ".join(args[1:]))
        return f"Created workspace: {ws.name}"

    if sub in ("use", "rename", "close"):
        ws = _workspace_by_number(state, args[1]) if len(args) > 1 else None
        if ws is None:
            return f"Usage: /ws {sub} <n>{' <name>' if sub == 'rename' else ''}"

        if sub == "use":
            state.store.switch_workspace(ws.id)
            return f"Switched to: {ws.name}"

        if sub == "rename":
            if not state.store.rename_workspace(ws.id, " ".join(args[2:])):
                return "Usage: /ws rename <n> <name>"
            return f"Renamed to: {ws.name}"

        if len(args) < 3 or args[2].lower() != "yes":
            return f"Close '{ws.name}' and all its days? Repeat with: /ws close {args[1]} yes"
        if not state.close_workspace(ws.id):
            return "Can't close the last workspace."
        return f"Closed workspace: {ws.name}"

    return "Usage: /ws [list | new <name> | use <n> | rename <n> <name> | close <n> yes]"


def cmd_history(state: AppState, args: list[str]) -> str:
    limit = _parse_int(args[0]) if args else None
    records = state.ledger.records()
    if not records:
        return "Nothing completed yet."
    shown = records[: limit if limit and limit > 0 else 20]
    lines = [f"Completed ({len(records)} total):"]
    for r in shown:
        lines.append(f"  {r.completed_at:%Y-%m-%d %H:%M}  {r.text}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show workspace / day / navigation state.")
registry.register("add", cmd_add, help_text="Add a task to today: /add <text>.", aliases=["a"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n> <text>.", aliases=["e"])
registry.register("done", cmd_done, help_text="Toggle completed: /done <n>.", aliases=["x"])
registry.register("pin", cmd_pin, help_text="Toggle pinned (carries into tomorrow): /pin <n>.")
registry.register("del", cmd_del, help_text="Delete a task: /del <n>.", aliases=["rm"])
registry.register("move", cmd_move, help_text="Reorder: /move <n> <position>.", aliases=["mv"])
registry.register("older", cmd_older, help_text="Go one day back.", aliases=["prev", "k"])
registry.register("newer", cmd_newer, help_text="Go one day forward.", aliases=["next", "j"])
registry.register("go", cmd_go, help_text="Jump to a day: /go <days back> (0 = today).")
registry.register("today", cmd_today, help_text="Back to today.", aliases=["t"])
registry.register("copy", cmd_copy, help_text="Copy the viewed day's unfinished tasks to today.")
registry.register("ws", cmd_ws, help_text="Workspaces: /ws [list|new|use|rename|close].")
registry.register("history", cmd_history, help_text="Completion log: /history [limit].")
