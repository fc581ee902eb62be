"""History query entry point."""

from __future__ import annotations

import time
from datetime import datetime

from disk_history.core.errors import DiskHistoryError, NotFoundError
from disk_history.core.logging import get_logger
from disk_history.core.metrics import (
    CLOSURE_RECORDS,
    HISTORY_LATENCY,
    HISTORY_QUERIES,
    RECONSTRUCTION_INSTANTS,
)
from disk_history.db.history import HistoryRepository
from disk_history.db.items import ItemRepository
from disk_history.history.leaf import project_leaf_history
from disk_history.history.reconstruction import reconstruct_subtree
from disk_history.ingest.validation import check_window
from disk_history.models.entities import ItemType, ReconstructedUnit

logger = get_logger(__name__)


class HistoryService:
    """Route a history query to the file or folder path.

    Read-only; queries share no state, so one instance serves concurrent callers.
    """

    def __init__(self, items: ItemRepository, history: HistoryRepository) -> None:
        self.items = items
        self.history = history

    def get_history(self, item_id: str, start: datetime, end: datetime) -> list[ReconstructedUnit]:
        check_window(start, end)
        item = self.items.find_by_id(item_id)
        if item is None:
            HISTORY_QUERIES.labels(kind="unknown", outcome="not_found").inc()
            raise NotFoundError(f"item {item_id} not found")

        kind = item.type.value.lower()
        started = time.perf_counter()
        try:
            if item.type is ItemType.FILE:
                units = self._file_history(item_id, start, end)
            else:
                units = self._folder_history(item_id, start, end)
        except DiskHistoryError:
            HISTORY_QUERIES.labels(kind=kind, outcome="error").inc()
            raise
        HISTORY_QUERIES.labels(kind=kind, outcome="ok").inc()
        HISTORY_LATENCY.labels(kind=kind).observe(time.perf_counter() - started)
        logger.info(
            "history for %s %s: %s units",
            kind,
            item_id,
            len(units),
            extra={"ctx_item_id": item_id, "ctx_start": start, "ctx_end": end},
        )
        return units

    def _file_history(self, item_id: str, start: datetime, end: datetime) -> list[ReconstructedUnit]:
        return project_leaf_history(self.history.find_by_window(item_id, start, end))

    def _folder_history(self, item_id: str, start: datetime, end: datetime) -> list[ReconstructedUnit]:
        closure = self.history.find_closure(item_id)
        CLOSURE_RECORDS.observe(len(closure))
        RECONSTRUCTION_INSTANTS.observe(len({record.update_time for record in closure}))
        logger.debug("closure for %s holds %s records", item_id, len(closure))
        return reconstruct_subtree(item_id, closure, start, end)


__all__ = ["HistoryService"]
