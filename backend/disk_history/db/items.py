"""Current item tree storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Iterable, Sequence

from disk_history.db.sqlite import SQLiteDatabase
from disk_history.models.entities import Item, ItemType
from disk_history.utils.time import from_ms, to_ms

_ITEM_COLUMNS = "id, parent_id, type, url, size, date"

SUBTREE_IDS_SQL = """
WITH RECURSIVE subtree(id) AS (
  SELECT id FROM items WHERE id = ?
  UNION
  SELECT items.id FROM items JOIN subtree ON items.parent_id = subtree.id
)
SELECT id FROM subtree
"""


class ItemRepository:
    """Reads and writes the current state of every file and folder."""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    def find_by_id(self, item_id: str) -> Item | None:
        row = self.db.query_one(f"SELECT {_ITEM_COLUMNS} FROM items WHERE id = ?", [item_id])
        return _row_to_item(row) if row else None

    def find_many(self, item_ids: Iterable[str]) -> dict[str, Item]:
        ids = list(dict.fromkeys(item_ids))
        if not ids:
            return {}
        placeholders = ",".join("?" for _ in ids)
        rows = self.db.query(f"SELECT {_ITEM_COLUMNS} FROM items WHERE id IN ({placeholders})", ids)
        return {row["id"]: _row_to_item(row) for row in rows}

    def find_subtree(self, root_id: str) -> list[Item]:
        """Return the root and every current descendant, unordered."""
        rows = self.db.query(
            f"SELECT {_ITEM_COLUMNS} FROM items WHERE id IN ({SUBTREE_IDS_SQL})",
            [root_id],
        )
        return [_row_to_item(row) for row in rows]

    def ancestor_ids(self, item_id: str | None) -> list[str]:
        """Walk parent links upwards from ``item_id`` (inclusive)."""
        ancestors: list[str] = []
        seen: set[str] = set()
        current = item_id
        while current is not None and current not in seen:
            seen.add(current)
            row = self.db.query_one("SELECT id, parent_id FROM items WHERE id = ?", [current])
            if row is None:
                break
            ancestors.append(row["id"])
            current = row["parent_id"]
        return ancestors

    def upsert(self, item: Item) -> None:
        self.db.execute(
            """
            INSERT INTO items (id, parent_id, type, url, size, date)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
              parent_id = excluded.parent_id,
              type = excluded.type,
              url = excluded.url,
              size = excluded.size,
              date = excluded.date
            """,
            [item.id, item.parent_id, item.type.value, item.url, item.size, to_ms(item.date)],
        )

    def touch(self, item_ids: Sequence[str], date: datetime) -> None:
        """Set ``date`` on the given folders."""
        if not item_ids:
            return
        placeholders = ",".join("?" for _ in item_ids)
        self.db.execute(
            f"UPDATE items SET date = ? WHERE type = 'FOLDER' AND id IN ({placeholders})",
            [to_ms(date), *item_ids],
        )

    def delete_subtree(self, root_id: str) -> int:
        cursor = self.db.execute(f"DELETE FROM items WHERE id IN ({SUBTREE_IDS_SQL})", [root_id])
        return cursor.rowcount

    def files_updated_between(self, start: datetime, end: datetime) -> list[Item]:
        """Files whose ``date`` lies in ``[start, end]``, oldest first."""
        rows = self.db.query(
            f"""
            SELECT {_ITEM_COLUMNS} FROM items
            WHERE type = 'FILE' AND date >= ? AND date <= ?
            ORDER BY date, id
            """,
            [to_ms(start), to_ms(end)],
        )
        return [_row_to_item(row) for row in rows]


def _row_to_item(row: sqlite3.Row) -> Item:
    return Item(
        id=row["id"],
        parent_id=row["parent_id"],
        type=ItemType(row["type"]),
        url=row["url"],
        size=row["size"],
        date=from_ms(row["date"]),
    )


__all__ = ["ItemRepository", "SUBTREE_IDS_SQL"]
