"""Validation of caller-supplied time windows and import batches."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Mapping

from disk_history.core.errors import ValidationError
from disk_history.models.dto import ImportItem, ImportRequest
from disk_history.models.entities import Item, ItemType
from disk_history.utils.time import EPOCH, FAR_FUTURE, as_utc


def normalize_window(start: datetime | None, end: datetime | None) -> tuple[datetime, datetime]:
    """Fill open bounds and convert both to UTC.

    A missing start means the Unix epoch, a missing end means the far future.
    """
    normalized_start = as_utc(start) if start is not None else EPOCH
    normalized_end = as_utc(end) if end is not None else FAR_FUTURE
    return normalized_start, normalized_end


def check_window(start: datetime, end: datetime) -> None:
    if start >= end:
        raise ValidationError(f"window start {start.isoformat()} is not before end {end.isoformat()}")


def validate_import(
    request: ImportRequest,
    stored: Mapping[str, Item],
    max_url_length: int = 255,
) -> None:
    """Reject the whole batch on the first inconsistency.

    ``stored`` holds the current rows for every id the batch mentions, either
    as an item or as a parent.
    """
    counts = Counter(item.id for item in request.items)
    duplicates = sorted(item_id for item_id, count in counts.items() if count > 1)
    if duplicates:
        raise ValidationError(f"duplicate ids in batch: {', '.join(duplicates)}")

    batch_types = {item.id: item.type for item in request.items}
    for item in request.items:
        _validate_item(item, max_url_length)
        existing = stored.get(item.id)
        if existing is not None and existing.type is not item.type:
            raise ValidationError(f"item {item.id} cannot change type from {existing.type.value}")
        if item.parent_id is None:
            continue
        if item.parent_id == item.id:
            raise ValidationError(f"item {item.id} cannot be its own parent")
        parent_type = batch_types.get(item.parent_id)
        if parent_type is None and item.parent_id in stored:
            parent_type = stored[item.parent_id].type
        if parent_type is not ItemType.FOLDER:
            raise ValidationError(f"parent {item.parent_id} of {item.id} is not a known folder")


def _validate_item(item: ImportItem, max_url_length: int) -> None:
    if not item.id:
        raise ValidationError("item id must not be empty")
    if item.type is ItemType.FOLDER:
        if item.url is not None or item.size is not None:
            raise ValidationError(f"folder {item.id} must not carry url or size")
        return
    if item.url is None or len(item.url) > max_url_length:
        raise ValidationError(f"file {item.id} needs a url of at most {max_url_length} characters")
    if item.size is None or item.size <= 0:
        raise ValidationError(f"file {item.id} needs a positive size")


__all__ = ["normalize_window", "check_window", "validate_import"]
