"""File history projection."""

from __future__ import annotations

from typing import Iterable

from disk_history.models.entities import ReconstructedUnit, SnapshotRecord


def project_leaf_history(records: Iterable[SnapshotRecord]) -> list[ReconstructedUnit]:
    """Map each file snapshot to a unit dated at its own ``update_time``."""
    return [ReconstructedUnit.from_record(record, record.size, record.update_time) for record in records]


__all__ = ["project_leaf_history"]
