"""Test fixtures for Disk History."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from disk_history.models.entities import ItemType, SnapshotRecord  # noqa: E402

T0 = datetime(2022, 2, 1, 12, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    """Instant ``minutes`` after T0."""
    return T0 + timedelta(minutes=minutes)


def file_record(item_id: str, parent_id: str | None, size: int, when: datetime) -> SnapshotRecord:
    return SnapshotRecord(
        item_id=item_id,
        parent_id=parent_id,
        item_type=ItemType.FILE,
        url=f"/{item_id}",
        size=size,
        update_time=when,
    )


def folder_record(item_id: str, parent_id: str | None, when: datetime) -> SnapshotRecord:
    return SnapshotRecord(
        item_id=item_id,
        parent_id=parent_id,
        item_type=ItemType.FOLDER,
        url=None,
        size=None,
        update_time=when,
    )


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point storage at a fresh database and drop cached singletons."""
    monkeypatch.setenv("DSKH_DB_PATH", str(tmp_path / "history.db"))
    monkeypatch.delenv("DSKH_CONFIG", raising=False)

    from disk_history.api import dependencies as deps

    deps.reset_dependencies()
    yield
    deps.reset_dependencies()


@pytest.fixture
def database(tmp_path: Path):
    from disk_history.db.sqlite import SQLiteDatabase

    db = SQLiteDatabase(tmp_path / "store.db")
    db.ensure_schema()
    yield db
    db.close()
