"""History API routes."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from disk_history.api.dependencies import get_history_service
from disk_history.history.dispatcher import HistoryService
from disk_history.ingest.validation import normalize_window
from disk_history.models.dto import ErrorResponse, HistoryResponse

router = APIRouter()


@router.get(
    "/node/{item_id}/history",
    response_model=HistoryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Snapshot history of a file or reconstructed history of a folder",
)
async def get_history(
    item_id: str,
    date_start: datetime | None = Query(default=None, alias="dateStart"),
    date_end: datetime | None = Query(default=None, alias="dateEnd"),
    service: HistoryService = Depends(get_history_service),
) -> HistoryResponse:
    start, end = normalize_window(date_start, date_end)
    return HistoryResponse.from_units(service.get_history(item_id, start, end))


__all__ = ["router"]
