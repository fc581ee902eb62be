"""Import, delete, node and updates routes."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response

from disk_history.api.dependencies import get_import_service, get_node_service
from disk_history.history.nodes import NodeService
from disk_history.ingest.imports import ImportService
from disk_history.models.dto import ErrorResponse, HistoryResponse, ImportRequest, NodeResponse

router = APIRouter()

_ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.post("/imports", responses=_ERRORS, summary="Import or update items")
async def import_items(
    request: ImportRequest,
    service: ImportService = Depends(get_import_service),
) -> Response:
    service.import_items(request)
    return Response(status_code=200)


@router.delete("/delete/{item_id}", responses=_ERRORS, summary="Remove an item and its subtree")
async def delete_item(
    item_id: str,
    date: datetime = Query(...),
    service: ImportService = Depends(get_import_service),
) -> Response:
    service.delete_item(item_id, date)
    return Response(status_code=200)


@router.get("/nodes/{item_id}", response_model=NodeResponse, responses=_ERRORS, summary="Current item tree")
async def get_node(item_id: str, service: NodeService = Depends(get_node_service)) -> NodeResponse:
    return service.get_node(item_id)


@router.get("/updates", response_model=HistoryResponse, responses=_ERRORS, summary="Recently updated files")
async def get_updates(
    date: datetime = Query(...),
    service: NodeService = Depends(get_node_service),
) -> HistoryResponse:
    return HistoryResponse.from_units(service.recent_updates(date))


__all__ = ["router"]
