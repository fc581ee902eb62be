"""Append-only snapshot log storage.

Rows are never updated or deleted; the schema enforces this with triggers.
Folder changes are not logged here. The subtree closure instead synthesizes
one folder record per folder from the current item tree, so reconstruction
always sees folder topology as it is now.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime

from disk_history.db.items import SUBTREE_IDS_SQL
from disk_history.db.sqlite import SQLiteDatabase
from disk_history.models.entities import ItemType, SnapshotRecord
from disk_history.utils.time import from_ms, to_ms, to_ms_ceil

_HISTORY_COLUMNS = "item_id, parent_id, type, url, size, update_time"


class HistoryRepository:
    """Snapshot log reads used by history queries, plus the ingestion append."""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    def append(self, record: SnapshotRecord) -> None:
        self.db.execute(
            f"INSERT INTO history ({_HISTORY_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            [
                record.item_id,
                record.parent_id,
                record.item_type.value,
                record.url,
                record.size,
                to_ms(record.update_time),
            ],
        )

    def find_by_window(self, item_id: str, start: datetime, end: datetime) -> list[SnapshotRecord]:
        """Snapshots of one item with ``start <= update_time < end``, oldest first.

        Stored times are whole milliseconds, so both bounds round up to keep
        the comparison exact when they carry microseconds.
        """
        rows = self.db.query(
            f"""
            SELECT {_HISTORY_COLUMNS} FROM history
            WHERE item_id = ? AND update_time >= ? AND update_time < ?
            ORDER BY update_time, seq
            """,
            [item_id, to_ms_ceil(start), to_ms_ceil(end)],
        )
        return [_row_to_record(row) for row in rows]

    def find_closure(self, root_id: str) -> list[SnapshotRecord]:
        """Every record of the root's current subtree across all time.

        Logged records come first in append order, followed by one record per
        folder built from its current item row. Memory use grows with the
        whole history of the subtree.
        """
        logged = self.db.query(
            f"""
            SELECT {_HISTORY_COLUMNS} FROM history
            WHERE item_id IN ({SUBTREE_IDS_SQL})
            ORDER BY seq
            """,
            [root_id],
        )
        folders = self.db.query(
            f"""
            SELECT id AS item_id, parent_id, type, url, NULL AS size, date AS update_time
            FROM items
            WHERE type = 'FOLDER' AND id IN ({SUBTREE_IDS_SQL})
            ORDER BY id
            """,
            [root_id],
        )
        return [_row_to_record(row) for row in logged] + [_row_to_record(row) for row in folders]

    def count(self, item_id: str | None = None) -> int:
        if item_id is None:
            row = self.db.query_one("SELECT COUNT(*) AS n FROM history")
        else:
            row = self.db.query_one("SELECT COUNT(*) AS n FROM history WHERE item_id = ?", [item_id])
        return int(row["n"]) if row else 0


def _row_to_record(row: sqlite3.Row) -> SnapshotRecord:
    item_type = ItemType(row["type"])
    return SnapshotRecord(
        item_id=row["item_id"],
        parent_id=row["parent_id"],
        item_type=item_type,
        url=row["url"],
        size=row["size"] if item_type is ItemType.FILE else None,
        update_time=from_ms(row["update_time"]),
    )


__all__ = ["HistoryRepository"]
