"""Import and delete orchestration for the item tree."""

from __future__ import annotations

from datetime import datetime

from disk_history.core.errors import NotFoundError, ValidationError
from disk_history.core.logging import get_logger
from disk_history.core.metrics import IMPORTED_ITEMS
from disk_history.db.history import HistoryRepository
from disk_history.db.items import ItemRepository
from disk_history.db.sqlite import SQLiteDatabase
from disk_history.ingest.validation import validate_import
from disk_history.models.dto import ImportRequest
from disk_history.models.entities import Item, ItemType
from disk_history.utils.time import as_utc

logger = get_logger(__name__)


class ImportService:
    """Apply import batches and deletions; append one snapshot per imported file.

    Folder changes only touch the item tree. Every write happens in a single
    transaction so a rejected batch leaves no trace.
    """

    def __init__(
        self,
        db: SQLiteDatabase,
        items: ItemRepository,
        history: HistoryRepository,
        max_url_length: int = 255,
    ) -> None:
        self.db = db
        self.items = items
        self.history = history
        self.max_url_length = max_url_length

    def import_items(self, request: ImportRequest) -> int:
        update_date = as_utc(request.update_date)
        mentioned = {item.id for item in request.items}
        mentioned.update(item.parent_id for item in request.items if item.parent_id)
        stored = self.items.find_many(mentioned)
        validate_import(request, stored, max_url_length=self.max_url_length)
        self._check_acyclic(request, stored)

        touched: list[str] = []
        with self.db.transaction():
            for entry in request.items:
                previous = stored.get(entry.id)
                if previous is not None and previous.parent_id:
                    touched.extend(self.items.ancestor_ids(previous.parent_id))
                item = Item(
                    id=entry.id,
                    parent_id=entry.parent_id,
                    type=entry.type,
                    url=entry.url,
                    size=entry.size,
                    date=update_date,
                )
                self.items.upsert(item)
                if item.type is ItemType.FILE:
                    self.history.append(item.as_record())
            # New parent chains are resolved after every row of the batch is in place.
            for entry in request.items:
                if entry.parent_id:
                    touched.extend(self.items.ancestor_ids(entry.parent_id))
            self.items.touch(list(dict.fromkeys(touched)), update_date)

        for entry in request.items:
            IMPORTED_ITEMS.labels(type=entry.type.value).inc()

        logger.info(
            "imported %s items",
            len(request.items),
            extra={"ctx_update_date": update_date, "ctx_touched_folders": len(set(touched))},
        )
        return len(request.items)

    def delete_item(self, item_id: str, date: datetime) -> int:
        """Drop the item and its subtree from the tree; snapshot history is kept."""
        item = self.items.find_by_id(item_id)
        if item is None:
            raise NotFoundError(f"item {item_id} not found")
        with self.db.transaction():
            ancestors = self.items.ancestor_ids(item.parent_id)
            removed = self.items.delete_subtree(item_id)
            self.items.touch(ancestors, as_utc(date))
        logger.info("deleted %s items under %s", removed, item_id, extra={"ctx_item_id": item_id})
        return removed

    def _check_acyclic(self, request: ImportRequest, stored: dict[str, Item]) -> None:
        proposed = {entry.id: entry.parent_id for entry in request.items}
        for entry in request.items:
            seen = {entry.id}
            current = entry.parent_id
            while current is not None:
                if current in seen:
                    raise ValidationError(f"moving {entry.id} under {entry.parent_id} creates a cycle")
                seen.add(current)
                if current in proposed:
                    current = proposed[current]
                    continue
                parent = stored.get(current) or self.items.find_by_id(current)
                current = parent.parent_id if parent is not None else None


__all__ = ["ImportService"]
