"""SQLAlchemy adapter package for assetledger."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyArchiveRepository,
    SqlAlchemyAuditLogRepository,
    SqlAlchemyDeviceRepository,
)
from .unit_of_work import SqlAlchemyInventoryUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyArchiveRepository",
    "SqlAlchemyAuditLogRepository",
    "SqlAlchemyDeviceRepository",
    "SqlAlchemyInventoryUnitOfWork",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
