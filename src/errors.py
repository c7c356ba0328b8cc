"""Error taxonomy shared by services and routes."""

from __future__ import annotations

from fastapi import status


class PortalError(Exception):
    """Base error carrying the HTTP status used when it reaches a route."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PortalError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(PortalError):
    """No session or an invalid one."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class Forbidden(PortalError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class NotFound(PortalError):
    """Missing resource, or one the caller does not own."""

    status_code = status.HTTP_404_NOT_FOUND


class StorageError(PortalError):
    """Blob storage upload, delete or signing failure."""

    status_code = status.HTTP_502_BAD_GATEWAY


class StorageWriteError(StorageError):
    pass


class StorageDeleteError(StorageError):
    pass


class StorageSignError(StorageError):
    pass


class IndexSyncError(PortalError):
    """Document index failure. Logged, never shown to end users."""

    status_code = status.HTTP_502_BAD_GATEWAY


class IndexIngestError(IndexSyncError):
    def __init__(self, chunk_id: str, reason: str) -> None:
        super().__init__(f"Failed to ingest chunk {chunk_id}: {reason}")
        self.chunk_id = chunk_id
