"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from disk_history.models.entities import ItemType, ReconstructedUnit


class ImportItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: str | None = None
    parent_id: str | None = Field(default=None, alias="parentId")
    type: ItemType
    size: int | None = None


class ImportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: list[ImportItem] = Field(default_factory=list)
    update_date: datetime = Field(alias="updateDate")


class HistoryUnit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: str | None = None
    parent_id: str | None = Field(default=None, alias="parentId")
    type: ItemType
    size: int | None = None
    date: datetime

    @classmethod
    def from_unit(cls, unit: ReconstructedUnit) -> "HistoryUnit":
        return cls(
            id=unit.item_id,
            url=unit.url,
            parent_id=unit.parent_id,
            type=unit.item_type,
            size=unit.size,
            date=unit.date,
        )


class HistoryResponse(BaseModel):
    items: list[HistoryUnit] = Field(default_factory=list)

    @classmethod
    def from_units(cls, units: Sequence[ReconstructedUnit]) -> "HistoryResponse":
        return cls(items=[HistoryUnit.from_unit(unit) for unit in units])


class NodeResponse(BaseModel):
    """Current node with its nested children; ``children`` is null for files."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: str | None = None
    parent_id: str | None = Field(default=None, alias="parentId")
    type: ItemType
    size: int | None = None
    date: datetime
    children: list["NodeResponse"] | None = None


class ErrorResponse(BaseModel):
    code: int
    message: str


NodeResponse.model_rebuild()


__all__ = [
    "ImportItem",
    "ImportRequest",
    "HistoryUnit",
    "HistoryResponse",
    "NodeResponse",
    "ErrorResponse",
]
