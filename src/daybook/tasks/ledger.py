# src/daybook/tasks/ledger.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from .task_models import CompletionRecord

logger = logging.getLogger(__name__)


class CompletionLedger:
    """
    Append-only completion history, most recent first.

    There is no update/delete API: deleting or un-completing a task never
    touches what is recorded here.
    """

    def __init__(self, records: Iterable[CompletionRecord] = ()) -> None:
        self._records: list[CompletionRecord] = list(records)

    def record(self, event: CompletionRecord) -> None:
        self._records.insert(0, event)
        logger.debug("Completion recorded task_id=%s date=%s", event.task_id, event.completed_on)

    def records(self) -> list[CompletionRecord]:
        """Full ordered sequence (copy), newest first."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompletionLedger):
            return NotImplemented
        return self._records == other._records
