"""FastAPI application setup for Disk History."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from disk_history.api.dependencies import (
    get_app_settings,
    get_database,
    get_history_service,
    get_import_service,
    get_node_service,
)
from disk_history.api.routes_history import router as history_router
from disk_history.api.routes_items import router as items_router
from disk_history.core.errors import DiskHistoryError, StorageError, ValidationError
from disk_history.core.logging import configure_logging, get_logger
from disk_history.core.metrics import metrics_response

_settings = get_app_settings()
configure_logging(_settings.log_level, use_json=_settings.log_json)
logger = get_logger(__name__)

app = FastAPI(
    title="Disk History",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(items_router, prefix="", tags=["items"])
app.include_router(history_router, prefix="", tags=["history"])


@app.exception_handler(DiskHistoryError)
async def handle_service_error(request: Request, exc: DiskHistoryError) -> JSONResponse:
    if isinstance(exc, StorageError) or exc.status_code >= 500:
        logger.error("storage failure on %s: %s", request.url.path, exc.detail)
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.status_code, "message": exc.public_message},
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("malformed request on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"code": ValidationError.status_code, "message": ValidationError.public_message},
    )


@app.on_event("startup")
async def startup() -> None:
    """Open the database and build services before the first request."""
    get_database()
    get_history_service()
    get_import_service()
    get_node_service()


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}


@app.get("/metrics", tags=["admin"], summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()
