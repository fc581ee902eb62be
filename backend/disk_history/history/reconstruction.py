"""Point-in-time reconstruction of a folder subtree from the snapshot log.

For every distinct instant in the subtree's log (latest first) the working set
of records is narrowed by dropping file records newer than that instant, the
latest remaining record of each item is taken as its state at that instant,
and the root's size is recomputed from the files reachable beneath it.

Folder records are never dropped: every instant sees the most recent known
folder layout, including instants that predate a folder move.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Iterator, Sequence

from disk_history.history.sizes import aggregate_size, build_children_index
from disk_history.models.entities import ReconstructedUnit, SnapshotRecord


def distinct_instants(records: Iterable[SnapshotRecord]) -> list[datetime]:
    """Distinct ``update_time`` values, most recent first."""
    return sorted({record.update_time for record in records}, reverse=True)


def iter_working_sets(
    records: Sequence[SnapshotRecord],
    instants: Iterable[datetime],
) -> Iterator[tuple[datetime, list[SnapshotRecord]]]:
    """Yield ``(instant, working_set)`` pairs for descending instants.

    The exclusion set only ever grows: once a file record is newer than some
    instant it stays excluded for every earlier one. The set is rebuilt
    rather than mutated, and pending file records are kept newest first so
    each instant only inspects the records it is about to exclude.
    """
    pending = sorted(
        (position for position, record in enumerate(records) if record.is_file),
        key=lambda position: records[position].update_time,
        reverse=True,
    )
    cursor = 0
    excluded: frozenset[int] = frozenset()
    for instant in instants:
        newly_excluded: list[int] = []
        while cursor < len(pending) and records[pending[cursor]].update_time > instant:
            newly_excluded.append(pending[cursor])
            cursor += 1
        if newly_excluded:
            excluded = excluded.union(newly_excluded)
        yield instant, [record for position, record in enumerate(records) if position not in excluded]


def project_as_of(working_set: Iterable[SnapshotRecord]) -> dict[str, SnapshotRecord]:
    """Latest record per item; on equal ``update_time`` the later one in the sequence wins."""
    projection: dict[str, SnapshotRecord] = {}
    for record in working_set:
        current = projection.get(record.item_id)
        if current is None or record.update_time >= current.update_time:
            projection[record.item_id] = record
    return projection


def reconstruct_at(root_id: str, working_set: Iterable[SnapshotRecord], instant: datetime) -> ReconstructedUnit | None:
    """State of ``root_id`` at ``instant``, or None when the root has no record yet."""
    projection = project_as_of(working_set)
    root = projection.get(root_id)
    if root is None:
        return None
    children_index = build_children_index(projection.values())
    return ReconstructedUnit.from_record(root, aggregate_size(root_id, children_index), instant)


def reconstruct_subtree(
    root_id: str,
    closure: Sequence[SnapshotRecord],
    start: datetime,
    end: datetime,
) -> list[ReconstructedUnit]:
    """Reconstruct ``root_id`` at every instant of its closure within ``[start, end)``.

    ``closure`` holds every record of the root and its descendants across all
    time; results are ordered by date, most recent first.
    """
    units: list[ReconstructedUnit] = []
    for instant, working_set in iter_working_sets(closure, distinct_instants(closure)):
        unit = reconstruct_at(root_id, working_set, instant)
        if unit is not None:
            units.append(unit)
    return filter_window(dedupe(units), start, end)


def dedupe(units: Iterable[ReconstructedUnit]) -> list[ReconstructedUnit]:
    return list(dict.fromkeys(units))


def filter_window(units: Iterable[ReconstructedUnit], start: datetime, end: datetime) -> list[ReconstructedUnit]:
    return [unit for unit in units if start <= unit.date < end]


__all__ = [
    "distinct_instants",
    "iter_working_sets",
    "project_as_of",
    "reconstruct_at",
    "reconstruct_subtree",
    "dedupe",
    "filter_window",
]
