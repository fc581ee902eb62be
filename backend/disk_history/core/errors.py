"""Error taxonomy shared by storage, ingestion and history queries."""

from __future__ import annotations


class DiskHistoryError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code: int = 500
    public_message: str = "Internal Error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.public_message)
        self.detail = detail or self.public_message


class ValidationError(DiskHistoryError):
    """Caller input is malformed or inconsistent (bad window, bad import)."""

    status_code = 400
    public_message = "Validation Failed"


class NotFoundError(DiskHistoryError):
    """The requested item has no current record."""

    status_code = 404
    public_message = "Item not found"


class StorageError(DiskHistoryError):
    """A storage collaborator failed; not recovered locally."""


__all__ = ["DiskHistoryError", "ValidationError", "NotFoundError", "StorageError"]
