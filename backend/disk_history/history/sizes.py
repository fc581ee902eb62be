"""Folder size aggregation."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Mapping, Sequence

from disk_history.models.entities import SnapshotRecord

ChildrenIndex = Mapping[str | None, Sequence[SnapshotRecord]]


def build_children_index(records: Iterable[SnapshotRecord]) -> dict[str | None, list[SnapshotRecord]]:
    """Group records under their ``parent_id``; parentless records sit under ``None``."""
    index: defaultdict[str | None, list[SnapshotRecord]] = defaultdict(list)
    for record in records:
        index[record.parent_id].append(record)
    return dict(index)


def aggregate_size(node_id: str, children_index: ChildrenIndex) -> int | None:
    """Sum the sizes of every file beneath ``node_id``.

    Returns ``None`` when no file is reachable, so a folder without files is
    distinguishable from one holding zero-byte files. A node missing from the
    index has no children. The walk uses an explicit stack and visits each
    folder once, so deep or cyclic indexes cannot exhaust the interpreter stack.
    """
    total: int | None = None
    stack = [node_id]
    visited = {node_id}
    while stack:
        current = stack.pop()
        for child in children_index.get(current, ()):
            if child.is_file:
                total = (total or 0) + (child.size or 0)
            elif child.item_id not in visited:
                visited.add(child.item_id)
                stack.append(child.item_id)
    return total


__all__ = ["ChildrenIndex", "build_children_index", "aggregate_size"]
