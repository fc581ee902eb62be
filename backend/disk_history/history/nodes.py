"""Current-state views over the item tree."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from disk_history.core.errors import NotFoundError
from disk_history.db.items import ItemRepository
from disk_history.history.sizes import ChildrenIndex, aggregate_size, build_children_index
from disk_history.models.dto import NodeResponse
from disk_history.models.entities import Item, ItemType, ReconstructedUnit
from disk_history.utils.time import as_utc


class NodeService:
    def __init__(self, items: ItemRepository, updates_window_hours: int = 24) -> None:
        self.items = items
        self.updates_window = timedelta(hours=updates_window_hours)

    def get_node(self, item_id: str) -> NodeResponse:
        """Return the item with its nested children and recomputed folder sizes."""
        subtree = {item.id: item for item in self.items.find_subtree(item_id)}
        if item_id not in subtree:
            raise NotFoundError(f"item {item_id} not found")
        children_index = build_children_index(item.as_record() for item in subtree.values())

        nodes: dict[str, dict[str, Any]] = {}
        for item in subtree.values():
            nodes[item.id] = _node_payload(item, children_index)
        for item in sorted(subtree.values(), key=lambda entry: entry.id):
            if item.id == item_id or item.parent_id not in nodes:
                continue
            nodes[item.parent_id]["children"].append(nodes[item.id])
        return NodeResponse.model_validate(nodes[item_id])

    def recent_updates(self, date: datetime) -> list[ReconstructedUnit]:
        """Files changed within the configured window ending at ``date`` (inclusive)."""
        end = as_utc(date)
        return [
            ReconstructedUnit.from_record(item.as_record(), item.size, item.date)
            for item in self.items.files_updated_between(end - self.updates_window, end)
        ]


def _node_payload(item: Item, children_index: ChildrenIndex) -> dict[str, Any]:
    is_folder = item.type is ItemType.FOLDER
    return {
        "id": item.id,
        "url": item.url,
        "parentId": item.parent_id,
        "type": item.type,
        "size": aggregate_size(item.id, children_index) if is_folder else item.size,
        "date": item.date,
        "children": [] if is_folder else None,
    }


__all__ = ["NodeService"]
