"""Tests for history query routing."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from conftest import at, file_record, folder_record

from disk_history.core.errors import NotFoundError, StorageError, ValidationError
from disk_history.core.metrics import REGISTRY
from disk_history.history.dispatcher import HistoryService
from disk_history.models.entities import Item, ItemType


def _service(item: Item | None) -> tuple[HistoryService, MagicMock, MagicMock]:
    items = MagicMock()
    items.find_by_id.return_value = item
    history = MagicMock()
    return HistoryService(items=items, history=history), items, history


def _item(item_id: str, item_type: ItemType) -> Item:
    return Item(id=item_id, parent_id=None, type=item_type, url=None, size=None, date=at(0))


@pytest.mark.parametrize("start, end", [(at(1), at(1)), (at(2), at(1))])
def test_invalid_window_fails_before_any_read(start, end) -> None:
    service, items, history = _service(_item("root", ItemType.FOLDER))
    with pytest.raises(ValidationError):
        service.get_history("root", start, end)
    items.find_by_id.assert_not_called()
    history.find_closure.assert_not_called()
    history.find_by_window.assert_not_called()


def test_unknown_item_is_not_found() -> None:
    service, _, history = _service(None)
    with pytest.raises(NotFoundError):
        service.get_history("missing", at(0), at(1))
    history.find_closure.assert_not_called()


def test_file_history_maps_each_snapshot() -> None:
    service, _, history = _service(_item("f", ItemType.FILE))
    snapshots = [file_record("f", "root", 1, at(0)), file_record("f", "root", 2, at(1))]
    history.find_by_window.return_value = snapshots

    units = service.get_history("f", at(0), at(5))

    history.find_by_window.assert_called_once_with("f", at(0), at(5))
    history.find_closure.assert_not_called()
    assert [(unit.date, unit.size) for unit in units] == [(at(0), 1), (at(1), 2)]
    assert [unit.date for unit in units] == [snapshot.update_time for snapshot in snapshots]


def test_folder_history_uses_unbounded_closure() -> None:
    service, _, history = _service(_item("root", ItemType.FOLDER))
    history.find_closure.return_value = [
        folder_record("root", None, at(3)),
        file_record("a", "root", 4, at(0)),
        file_record("a", "root", 6, at(3)),
    ]

    units = service.get_history("root", at(1), at(5))

    history.find_closure.assert_called_once_with("root")
    assert [(unit.date, unit.size) for unit in units] == [(at(3), 6)]


def test_storage_failures_propagate() -> None:
    service, _, history = _service(_item("root", ItemType.FOLDER))
    history.find_closure.side_effect = StorageError("disk I/O error")
    with pytest.raises(StorageError):
        service.get_history("root", at(0), at(1))


def test_folder_history_records_instant_count() -> None:
    service, _, history = _service(_item("root", ItemType.FOLDER))
    history.find_closure.return_value = [
        folder_record("root", None, at(3)),
        file_record("a", "root", 4, at(0)),
        file_record("b", "root", 6, at(3)),
    ]
    before = REGISTRY.get_sample_value("dskh_reconstruction_instants_sum") or 0.0

    service.get_history("root", at(0), at(5))

    assert REGISTRY.get_sample_value("dskh_reconstruction_instants_sum") == before + 2
