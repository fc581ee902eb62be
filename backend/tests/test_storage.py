"""Tests for the SQLite item tree and snapshot log."""

from __future__ import annotations

from datetime import timedelta

import pytest
from conftest import at, file_record

from disk_history.core.errors import StorageError
from disk_history.db.history import HistoryRepository
from disk_history.db.items import ItemRepository
from disk_history.models.entities import Item, ItemType


def _folder(item_id: str, parent_id: str | None, minute: int = 0) -> Item:
    return Item(id=item_id, parent_id=parent_id, type=ItemType.FOLDER, url=None, size=None, date=at(minute))


def _file(item_id: str, parent_id: str | None, size: int, minute: int = 0) -> Item:
    return Item(id=item_id, parent_id=parent_id, type=ItemType.FILE, url=f"/{item_id}", size=size, date=at(minute))


def test_item_round_trip(database) -> None:
    items = ItemRepository(database)
    with database.transaction():
        items.upsert(_file("f", None, 12, minute=3))
    stored = items.find_by_id("f")
    assert stored == _file("f", None, 12, minute=3)
    assert items.find_by_id("missing") is None


def test_find_by_window_is_half_open_and_ordered(database) -> None:
    history = HistoryRepository(database)
    with database.transaction():
        for minute in (2, 0, 1, 3):
            history.append(file_record("f", "root", minute + 1, at(minute)))
        history.append(file_record("other", "root", 9, at(1)))

    records = history.find_by_window("f", at(1), at(3))
    assert [record.update_time for record in records] == [at(1), at(2)]
    assert all(record.item_id == "f" for record in records)


def test_find_by_window_handles_microsecond_bounds(database) -> None:
    history = HistoryRepository(database)
    with database.transaction():
        history.append(file_record("f", "root", 1, at(1)))
    half_ms = timedelta(microseconds=500)

    assert history.find_by_window("f", at(1) + half_ms, at(2)) == []
    assert history.find_by_window("f", at(1) - half_ms, at(2))[0].update_time == at(1)
    assert history.find_by_window("f", at(0), at(1) + half_ms)[0].update_time == at(1)
    assert history.find_by_window("f", at(0), at(1) - half_ms) == []


def test_closure_covers_current_subtree_and_folders(database) -> None:
    items = ItemRepository(database)
    history = HistoryRepository(database)
    with database.transaction():
        items.upsert(_folder("root", None, 2))
        items.upsert(_folder("sub", "root", 2))
        items.upsert(_file("a", "root", 5, 0))
        items.upsert(_file("b", "sub", 7, 2))
        items.upsert(_folder("elsewhere", None, 1))
        items.upsert(_file("c", "elsewhere", 1, 1))
        history.append(file_record("a", "root", 5, at(0)))
        history.append(file_record("b", "sub", 7, at(2)))
        history.append(file_record("c", "elsewhere", 1, at(1)))

    closure = history.find_closure("root")
    ids = {(record.item_id, record.item_type) for record in closure}
    assert ids == {
        ("a", ItemType.FILE),
        ("b", ItemType.FILE),
        ("root", ItemType.FOLDER),
        ("sub", ItemType.FOLDER),
    }
    assert all(record.size is None for record in closure if record.item_type is ItemType.FOLDER)


def test_history_rows_cannot_be_changed(database) -> None:
    history = HistoryRepository(database)
    with database.transaction():
        history.append(file_record("f", None, 1, at(0)))
    with pytest.raises(StorageError):
        with database.transaction():
            database.execute("DELETE FROM history")
    with pytest.raises(StorageError):
        with database.transaction():
            database.execute("UPDATE history SET size = 2")
    assert history.count("f") == 1


def test_delete_subtree_keeps_history(database) -> None:
    items = ItemRepository(database)
    history = HistoryRepository(database)
    with database.transaction():
        items.upsert(_folder("root", None))
        items.upsert(_folder("sub", "root"))
        items.upsert(_file("f", "sub", 3))
        history.append(file_record("f", "sub", 3, at(0)))
        removed = items.delete_subtree("sub")

    assert removed == 2
    assert items.find_by_id("f") is None
    assert items.find_by_id("root") is not None
    assert history.count() == 1


def test_ancestors_and_recent_files(database) -> None:
    items = ItemRepository(database)
    with database.transaction():
        items.upsert(_folder("root", None))
        items.upsert(_folder("sub", "root"))
        items.upsert(_file("old", "sub", 1, minute=0))
        items.upsert(_file("new", "sub", 1, minute=30))

    assert items.ancestor_ids("sub") == ["sub", "root"]
    assert items.ancestor_ids(None) == []
    assert [item.id for item in items.files_updated_between(at(10), at(30))] == ["new"]
