"""Append-only audit trail for device lifecycle transitions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Final

from assetledger.domain.errors import AuditWriteFailure, PersistenceError, ValidationError

if TYPE_CHECKING:
    from uuid import UUID

    from assetledger.domain.model import AuditEntry
    from assetledger.domain.ports import InventoryUnitOfWork

log = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS: Final[int] = 365

type UnitOfWorkFactory = Callable[[], InventoryUnitOfWork]
type Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class AuditPurgeResult:
    cutoff: datetime
    matched: int
    deleted: int
    dry_run: bool


class AuditTrail:
    """Writes and reads audit entries.

    ``append`` is strict and raises ``AuditWriteFailure``; ``record`` is the best-effort
    variant used once a primary write is already in the same transaction.
    """

    def __init__(self, *, unit_of_work_factory: UnitOfWorkFactory, clock: Clock = utcnow) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._clock = clock

    def append(self, uow: InventoryUnitOfWork, entry: AuditEntry) -> None:
        try:
            with uow.savepoint():
                uow.repositories.audit_log.add(entry)
        except PersistenceError as exc:
            raise AuditWriteFailure(
                f"Could not write {entry.action} audit entry for device {entry.device_id}: {exc}"
            ) from exc

    def record(self, uow: InventoryUnitOfWork, entry: AuditEntry) -> bool:
        try:
            self.append(uow, entry)
        except AuditWriteFailure as exc:
            log.warning("%s (primary change kept)", exc)
            return False
        return True

    def history(self, device_id: int) -> list[AuditEntry]:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.audit_log.for_device(device_id)

    def session_entries(self, session_id: UUID) -> list[AuditEntry]:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.audit_log.for_session(session_id)

    def purge(
        self, *, retention_days: int = DEFAULT_RETENTION_DAYS, dry_run: bool = True
    ) -> AuditPurgeResult:
        """Delete entries older than ``retention_days``; ``dry_run`` only counts them."""

        if retention_days < 1:
            raise ValidationError("Retention must be at least one day", field="retention_days")
        cutoff = self._clock() - timedelta(days=retention_days)
        with self._unit_of_work_factory() as uow:
            audit_log = uow.repositories.audit_log
            matched = audit_log.count_older_than(cutoff)
            if dry_run:
                log.info("Audit retention dry run: %d entries older than %s", matched, cutoff)
                return AuditPurgeResult(cutoff=cutoff, matched=matched, deleted=0, dry_run=True)
            deleted = audit_log.purge_older_than(cutoff) if matched else 0
            uow.commit()
        log.info("Purged %d audit entries older than %s", deleted, cutoff)
        return AuditPurgeResult(cutoff=cutoff, matched=matched, deleted=deleted, dry_run=False)
