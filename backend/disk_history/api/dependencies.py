"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from disk_history.core.config import Settings, get_settings
from disk_history.db.history import HistoryRepository
from disk_history.db.items import ItemRepository
from disk_history.db.sqlite import SQLiteDatabase
from disk_history.history.dispatcher import HistoryService
from disk_history.history.nodes import NodeService
from disk_history.ingest.imports import ImportService

_DB: SQLiteDatabase | None = None
_HISTORY_SERVICE: HistoryService | None = None
_IMPORT_SERVICE: ImportService | None = None
_NODE_SERVICE: NodeService | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_database() -> SQLiteDatabase:
    global _DB
    if _DB is None:
        settings = get_app_settings()
        db = SQLiteDatabase(settings.db_path, busy_timeout_ms=settings.busy_timeout_ms)
        db.ensure_schema()
        _DB = db
    return _DB


def get_history_service() -> HistoryService:
    global _HISTORY_SERVICE
    if _HISTORY_SERVICE is None:
        db = get_database()
        _HISTORY_SERVICE = HistoryService(items=ItemRepository(db), history=HistoryRepository(db))
    return _HISTORY_SERVICE


def get_import_service() -> ImportService:
    global _IMPORT_SERVICE
    if _IMPORT_SERVICE is None:
        db = get_database()
        _IMPORT_SERVICE = ImportService(
            db=db,
            items=ItemRepository(db),
            history=HistoryRepository(db),
            max_url_length=get_app_settings().max_url_length,
        )
    return _IMPORT_SERVICE


def get_node_service() -> NodeService:
    global _NODE_SERVICE
    if _NODE_SERVICE is None:
        _NODE_SERVICE = NodeService(
            items=ItemRepository(get_database()),
            updates_window_hours=get_app_settings().updates_window_hours,
        )
    return _NODE_SERVICE


def reset_dependencies() -> None:
    """Drop cached singletons; used by tests and on shutdown."""
    global _DB, _HISTORY_SERVICE, _IMPORT_SERVICE, _NODE_SERVICE
    if _DB is not None:
        _DB.close()
    _DB = None
    _HISTORY_SERVICE = None
    _IMPORT_SERVICE = None
    _NODE_SERVICE = None
    get_app_settings.cache_clear()
    get_settings.cache_clear()


__all__ = [
    "get_app_settings",
    "get_database",
    "get_history_service",
    "get_import_service",
    "get_node_service",
    "reset_dependencies",
]
