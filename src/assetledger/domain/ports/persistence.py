"""Ports for persisting inventory aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from assetledger.domain.model import ArchivedDevice, AuditEntry, Device

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from uuid import UUID


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class DeviceRepository(Repository[Device], Protocol):
    """Active device records."""

    def get(self, device_id: int) -> Device | None: ...

    def find_by_hostname(self, hostname: str) -> list[Device]: ...

    def find_by_serial_number(self, serial_number: str) -> list[Device]: ...

    def find_by_asset_tag(self, asset_tag: str) -> list[Device]: ...

    def find_by_mac_addresses(self, normalized_macs: Iterable[str]) -> list[Device]: ...

    def find_by_ip_addresses(self, addresses: Iterable[str]) -> list[Device]: ...

    def replace(self, device_id: int, values: Device) -> Device: ...

    def remove(self, device: Device) -> None: ...


@runtime_checkable
class ArchiveRepository(Repository[ArchivedDevice], Protocol):
    """Snapshots of deleted devices."""

    def get(self, archive_id: int) -> ArchivedDevice | None: ...

    def list_archived(self, *, include_restored: bool = False) -> list[ArchivedDevice]: ...

    def latest_for_device(self, original_device_id: int) -> ArchivedDevice | None: ...


@runtime_checkable
class AuditLogRepository(Repository[AuditEntry], Protocol):
    """Append-only audit log; entries are never updated through this port."""

    def for_device(self, device_id: int) -> list[AuditEntry]: ...

    def for_session(self, session_id: UUID) -> list[AuditEntry]: ...

    def count_older_than(self, cutoff: datetime) -> int: ...

    def purge_older_than(self, cutoff: datetime) -> int: ...
