# src/daybook/storage/gateway.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date

from ..core.ports import ClockSource, KeyValueStore
from ..tasks.ledger import CompletionLedger
from ..tasks.task_models import Note, Workspace, WorkspaceCollection
from .schema import (
    LegacyRecord,
    ModernRecord,
    SchemaError,
    StoredRecord,
    decode_collection,
    decode_ledger,
    decode_legacy,
    encode_collection,
    encode_ledger,
    legacy_to_modern,
)

logger = logging.getLogger(__name__)

WORKSPACES_KEY = "timeMachineWorkspaces"
COMPLETIONS_KEY = "timeMachineCompletions"
LEGACY_KEY = "timeMachineTodos"

DEFAULT_WORKSPACE_NAME = "Main"


@dataclass(slots=True)
class LoadedState:
    collection: WorkspaceCollection
    ledger: CompletionLedger
    migrated: bool = False
    repaired: bool = False


def _fix_workspace(ws: Workspace, today: date) -> bool:
    changed = False

    seen: set[date] = set()
    unique: list[Note] = []
    for note in ws.notes:
        if note.date in seen:
            logger.warning("Dropping duplicate note %s in workspace=%s", note.date, ws.id)
            changed = True
            continue
        seen.add(note.date)
        unique.append(note)
    ws.notes = unique

    if not ws.notes or (today not in seen and ws.notes[0].date < today):
        # Structural only: nothing is carried forward here.
        ws.notes.insert(0, Note(date=today))
        ws.current_index = 0
        changed = True

    if not 0 <= ws.current_index < len(ws.notes):
        ws.current_index = 0
        changed = True
    return changed


def ensure_today(collection: WorkspaceCollection, today: date) -> bool:
    """
    Load-time fix-up: every workspace gets a note dated today.

    Also drops duplicate-date notes, clamps current_index and repairs a
    dangling activeWorkspaceId. Returns True if anything changed.
    """
    changed = False
    for ws in collection.workspaces:
        changed = _fix_workspace(ws, today) or changed
    if collection.get(collection.active_workspace_id) is None:
        collection.active_workspace_id = collection.workspaces[0].id
        changed = True
    return changed


class PersistenceGateway:
    """
    Maps the workspace collection + completion ledger to durable storage.

    Two independent records under stable keys. A legacy single-list record is
    migrated once: after the first save the modern key exists and the legacy
    key is never read again (it is not deleted).
    """

    def __init__(self, kv: KeyValueStore, clock: ClockSource) -> None:
        self._kv = kv
        self._clock = clock

    # ---- save ----

    def save(self, collection: WorkspaceCollection, ledger: CompletionLedger) -> None:
        self._kv.set_many(
            {
                WORKSPACES_KEY: json.dumps(encode_collection(collection), ensure_ascii=False),
                COMPLETIONS_KEY: json.dumps(encode_ledger(ledger.records()), ensure_ascii=False),
            }
        )
        logger.debug(
            "State saved: %d workspace(s), %d completion(s)",
            len(collection.workspaces),
            len(ledger),
        )

    # ---- load ----

    def _read(self, key: str, decode) -> StoredRecord | None:
        raw = self._kv.get(key)
        if raw is None:
            return None
        try:
            return decode(json.loads(raw))
        except (ValueError, SchemaError, RecursionError):
            logger.exception("Stored record %s is unreadable; ignoring it", key)
            return None

    def _load_collection(self) -> tuple[WorkspaceCollection, bool]:
        record = self._read(WORKSPACES_KEY, decode_collection)
        if isinstance(record, ModernRecord):
            return record.collection, False

        legacy = self._read(LEGACY_KEY, decode_legacy)
        if isinstance(legacy, LegacyRecord):
            collection = legacy_to_modern(legacy)
            logger.info("Migrated legacy record: %d note(s) into workspace 'Main'", len(legacy.notes))
            return collection, True

        ws = Workspace.fresh(DEFAULT_WORKSPACE_NAME, self._clock.today())
        logger.info("No stored state; starting fresh workspace=%s", ws.id)
        return WorkspaceCollection(workspaces=[ws], active_workspace_id=ws.id), False

    def _load_ledger(self) -> CompletionLedger:
        raw = self._kv.get(COMPLETIONS_KEY)
        if raw is None:
            return CompletionLedger()
        try:
            return CompletionLedger(decode_ledger(json.loads(raw)))
        except (ValueError, SchemaError, RecursionError):
            logger.exception("Completion ledger is unreadable; starting empty")
            return CompletionLedger()

    def load(self) -> LoadedState:
        collection, migrated = self._load_collection()
        repaired = ensure_today(collection, self._clock.today())
        return LoadedState(
            collection=collection,
            ledger=self._load_ledger(),
            migrated=migrated,
            repaired=repaired,
        )
