"""Ports (interfaces) consumed by the inventory domain."""

from __future__ import annotations

from .persistence import ArchiveRepository, AuditLogRepository, DeviceRepository, Repository
from .unit_of_work import (
    InventoryRepositories,
    InventoryUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ArchiveRepository",
    "AuditLogRepository",
    "DeviceRepository",
    "InventoryRepositories",
    "InventoryUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
]
