"""Error taxonomy for inventory operations."""

from __future__ import annotations

from enum import StrEnum


class InventoryError(Exception):
    """Base class for inventory failures."""


class ValidationError(InventoryError):
    """Raised when a device or argument is malformed; nothing has touched the store."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(InventoryError):
    """Raised when an operation references an id outside the expected set."""


class PersistenceErrorKind(StrEnum):
    CONNECTIVITY = "connectivity"
    CONFLICT = "conflict"
    OTHER = "other"


class PersistenceError(InventoryError):
    """Raised when a store write or read fails; the operation has been rolled back."""

    def __init__(
        self, message: str, *, kind: PersistenceErrorKind = PersistenceErrorKind.OTHER
    ) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def is_conflict(self) -> bool:
        return self.kind is PersistenceErrorKind.CONFLICT


class StoreUnavailableError(PersistenceError):
    """Raised when the store cannot be reached at all."""

    def __init__(self, message: str) -> None:
        super().__init__(message, kind=PersistenceErrorKind.CONNECTIVITY)


class StaleDetectionError(InventoryError):
    """Raised when the records matched during detection changed before resolution."""


class AuditWriteFailure(InventoryError):
    """Raised when an audit entry could not be stored after the primary write."""
