# src/daybook/storage/schema.py

from __future__ import annotations

"""
Persisted record formats.

Two schemas are known:
- v2 (modern): {"version": 2, "workspaces": [...], "activeWorkspaceId": "..."}
  A record without "version" is read as v2.
- legacy (v1): a bare list of {"date", "todos": [{id, text, completed}]}
  with no workspace wrapper.

decode_* functions raise SchemaError on anything they do not recognize;
the gateway decides what to fall back to. legacy_to_modern() is pure.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from ..tasks.task_models import (
    CompletionRecord,
    Note,
    Task,
    Workspace,
    WorkspaceCollection,
    new_id,
)

SCHEMA_VERSION = 2
LEGACY_WORKSPACE_NAME = "Main"


class SchemaError(ValueError):
    """Stored data does not match any known schema."""


@dataclass(frozen=True, slots=True)
class ModernRecord:
    collection: WorkspaceCollection


@dataclass(frozen=True, slots=True)
class LegacyRecord:
    notes: list[Note]


StoredRecord = ModernRecord | LegacyRecord


# ---- field helpers ----


def _require(obj: Any, kind: type, what: str) -> Any:
    if not isinstance(obj, kind):
        raise SchemaError(f"{what}: expected {kind.__name__}, got {type(obj).__name__}")
    return obj


def _bool_field(obj: dict[str, Any], key: str, what: str) -> bool:
    if key not in obj:
        return False
    return _require(obj[key], bool, f"{what}.{key}")


def _str_field(obj: dict[str, Any], key: str, what: str) -> str:
    val = obj.get(key)
    if isinstance(val, int) and not isinstance(val, bool):
        # Old exports used numeric ids.
        return str(val)
    return _require(val, str, f"{what}.{key}")


def _parse_date(raw: Any, what: str) -> date:
    try:
        return date.fromisoformat(_require(raw, str, what))
    except ValueError as e:
        raise SchemaError(f"{what}: bad date {raw!r}") from e


# ---- tasks / notes ----


def encode_task(task: Task) -> dict[str, Any]:
    return {"id": task.id, "text": task.text, "completed": task.completed, "pinned": task.pinned}


def decode_task(raw: Any) -> Task:
    obj = _require(raw, dict, "task")
    return Task(
        id=_str_field(obj, "id", "task"),
        text=_str_field(obj, "text", "task"),
        completed=_bool_field(obj, "completed", "task"),
        pinned=_bool_field(obj, "pinned", "task"),
    )


def encode_note(note: Note) -> dict[str, Any]:
    return {"date": note.date.isoformat(), "tasks": [encode_task(t) for t in note.tasks]}


def _decode_note(raw: Any, tasks_key: str) -> Note:
    obj = _require(raw, dict, "note")
    tasks = _require(obj.get(tasks_key), list, f"note.{tasks_key}")
    return Note(date=_parse_date(obj.get("date"), "note.date"), tasks=[decode_task(t) for t in tasks])


# ---- v2 ----


def encode_collection(collection: WorkspaceCollection) -> dict[str, Any]:
    return {
        "version": SCHEMA_VERSION,
        "workspaces": [
            {
                "id": ws.id,
                "name": ws.name,
                "notes": [encode_note(n) for n in ws.notes],
                "currentIndex": ws.current_index,
            }
            for ws in collection.workspaces
        ],
        "activeWorkspaceId": collection.active_workspace_id,
    }


def decode_collection(raw: Any) -> ModernRecord:
    obj = _require(raw, dict, "record")
    version = obj.get("version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise SchemaError(f"unsupported record version {version!r}")

    workspaces: list[Workspace] = []
    for ws_raw in _require(obj.get("workspaces"), list, "workspaces"):
        ws_obj = _require(ws_raw, dict, "workspace")
        notes = [_decode_note(n, "tasks") for n in _require(ws_obj.get("notes"), list, "notes")]
        idx = ws_obj.get("currentIndex", 0)
        workspaces.append(
            Workspace(
                id=_str_field(ws_obj, "id", "workspace"),
                name=str(ws_obj.get("name") or ""),
                notes=notes,
                current_index=idx if isinstance(idx, int) and not isinstance(idx, bool) else 0,
            )
        )
    if not workspaces:
        raise SchemaError("record has no workspaces")

    active = obj.get("activeWorkspaceId")
    return ModernRecord(
        WorkspaceCollection(
            workspaces=workspaces,
            active_workspace_id=active if isinstance(active, str) else workspaces[0].id,
        )
    )


# ---- legacy ----


def decode_legacy(raw: Any) -> LegacyRecord:
    notes = [_decode_note(n, "todos") for n in _require(raw, list, "legacy record")]
    return LegacyRecord(notes=notes)


def legacy_to_modern(
    legacy: LegacyRecord, *, mint_id: Callable[[], str] = new_id
) -> WorkspaceCollection:
    """Wrap the legacy notes, untouched, in a single workspace named "Main"."""
    ws = Workspace(
        id=mint_id(),
        name=LEGACY_WORKSPACE_NAME,
        notes=list(legacy.notes),
        current_index=0,
    )
    return WorkspaceCollection(workspaces=[ws], active_workspace_id=ws.id)


# ---- completion ledger ----


def encode_ledger(records: list[CompletionRecord]) -> list[dict[str, Any]]:
    return [
        {
            "id": r.task_id,
            "text": r.text,
            "completedAt": r.completed_at.isoformat(),
            "completedDate": r.completed_on.isoformat(),
        }
        for r in records
    ]


def decode_ledger(raw: Any) -> list[CompletionRecord]:
    out: list[CompletionRecord] = []
    for item in _require(raw, list, "ledger"):
        obj = _require(item, dict, "completion")
        stamp = _require(obj.get("completedAt"), str, "completion.completedAt")
        try:
            completed_at = datetime.fromisoformat(stamp)
        except ValueError as e:
            raise SchemaError(f"completion.completedAt: bad timestamp {stamp!r}") from e
        out.append(
            CompletionRecord(
                task_id=_str_field(obj, "id", "completion"),
                text=_str_field(obj, "text", "completion"),
                completed_at=completed_at,
                completed_on=_parse_date(obj.get("completedDate"), "completion.completedDate"),
            )
        )
    return out
