"""Internal dataclasses representing persisted and computed entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ItemType(str, Enum):
    FILE = "FILE"
    FOLDER = "FOLDER"


@dataclass(frozen=True, slots=True)
class SnapshotRecord:
    """One immutable entry of the snapshot log.

    ``size`` is only meaningful for files; folder records always carry ``None``.
    """

    item_id: str
    parent_id: str | None
    item_type: ItemType
    url: str | None
    size: int | None
    update_time: datetime

    @property
    def is_file(self) -> bool:
        return self.item_type is ItemType.FILE


@dataclass(slots=True)
class Item:
    """Current state of a node in the item tree."""

    id: str
    parent_id: str | None
    type: ItemType
    url: str | None
    size: int | None
    date: datetime

    def as_record(self) -> SnapshotRecord:
        return SnapshotRecord(
            item_id=self.id,
            parent_id=self.parent_id,
            item_type=self.type,
            url=self.url,
            size=self.size if self.type is ItemType.FILE else None,
            update_time=self.date,
        )


@dataclass(frozen=True, slots=True)
class ReconstructedUnit:
    """State of a queried item at ``date``; hashable so duplicates can be dropped."""

    item_id: str
    url: str | None
    parent_id: str | None
    item_type: ItemType
    size: int | None
    date: datetime

    @classmethod
    def from_record(cls, record: SnapshotRecord, size: int | None, date: datetime) -> "ReconstructedUnit":
        return cls(
            item_id=record.item_id,
            url=record.url,
            parent_id=record.parent_id,
            item_type=record.item_type,
            size=size,
            date=date,
        )


__all__ = ["ItemType", "SnapshotRecord", "Item", "ReconstructedUnit"]
