"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ColumnElement, delete, func, or_, select

from assetledger.adapters.sqlalchemy.mappings import (
    deleted_device_table,
    device_audit_log_table,
    device_table,
)
from assetledger.domain.errors import NotFoundError
from assetledger.domain.model import (
    DEVICE_FIELDS,
    IP_FIELDS,
    MAC_FIELDS,
    ArchivedDevice,
    AuditEntry,
    Device,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy import Column
    from sqlalchemy.orm import Session


def normalized_mac_expression(column: Column[str] | ColumnElement[str]) -> ColumnElement[str]:
    """SQL equivalent of ``normalize_mac``: drop separators and upper-case."""

    expression: ColumnElement[str] = func.coalesce(column, "")
    for separator in (":", "-", ".", " "):
        expression = func.replace(expression, separator, "")
    return func.upper(expression)


class SqlAlchemyDeviceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Device) -> None:
        """Stage a new device and flush so its id is assigned."""

        self.session.add(entity)
        self.session.flush()

    def get(self, device_id: int) -> Device | None:
        return self.session.get(Device, device_id)

    def find_by_hostname(self, hostname: str) -> list[Device]:
        stmt = (
            select(Device)
            .where(func.lower(device_table.c.hostname) == hostname.strip().lower())
            .order_by(device_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def find_by_serial_number(self, serial_number: str) -> list[Device]:
        stmt = (
            select(Device)
            .where(device_table.c.serial_number == serial_number)
            .order_by(device_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def find_by_asset_tag(self, asset_tag: str) -> list[Device]:
        stmt = (
            select(Device).where(device_table.c.asset_tag == asset_tag).order_by(device_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def find_by_mac_addresses(self, normalized_macs: Iterable[str]) -> list[Device]:
        wanted = sorted({mac for mac in normalized_macs if mac})
        if not wanted:
            return []
        conditions = [
            normalized_mac_expression(device_table.c[name]).in_(wanted) for name in MAC_FIELDS
        ]
        stmt = select(Device).where(or_(*conditions)).order_by(device_table.c.id)
        return list(self.session.execute(stmt).scalars())

    def find_by_ip_addresses(self, addresses: Iterable[str]) -> list[Device]:
        wanted = sorted({address.strip() for address in addresses if address and address.strip()})
        if not wanted:
            return []
        conditions = [func.trim(device_table.c[name]).in_(wanted) for name in IP_FIELDS]
        stmt = select(Device).where(or_(*conditions)).order_by(device_table.c.id)
        return list(self.session.execute(stmt).scalars())

    def replace(self, device_id: int, values: Device) -> Device:
        """Overwrite every column of the stored row with ``values``, keeping its id."""

        stored = self.session.get(Device, device_id)
        if stored is None:
            raise NotFoundError(f"Device {device_id} not found")
        for name in DEVICE_FIELDS:
            if name == "id":
                continue
            setattr(stored, name, getattr(values, name))
        self.session.flush()
        return stored

    def remove(self, device: Device) -> None:
        self.session.delete(device)
        self.session.flush()


class SqlAlchemyArchiveRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ArchivedDevice) -> None:
        """Stage a snapshot and flush so its archive id is assigned."""

        self.session.add(entity)
        self.session.flush()

    def get(self, archive_id: int) -> ArchivedDevice | None:
        return self.session.get(ArchivedDevice, archive_id)

    def list_archived(self, *, include_restored: bool = False) -> list[ArchivedDevice]:
        stmt = select(ArchivedDevice).order_by(
            deleted_device_table.c.deleted_at.desc(), deleted_device_table.c.id.desc()
        )
        if not include_restored:
            stmt = stmt.where(deleted_device_table.c.restored_at.is_(None))
        return list(self.session.execute(stmt).scalars())

    def latest_for_device(self, original_device_id: int) -> ArchivedDevice | None:
        stmt = (
            select(ArchivedDevice)
            .where(deleted_device_table.c.original_device_id == original_device_id)
            .order_by(deleted_device_table.c.id.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyAuditLogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: AuditEntry) -> None:
        self.session.add(entity)

    def for_device(self, device_id: int) -> list[AuditEntry]:
        stmt = (
            select(AuditEntry)
            .where(device_audit_log_table.c.device_id == device_id)
            .order_by(device_audit_log_table.c.performed_at, device_audit_log_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def for_session(self, session_id: UUID) -> list[AuditEntry]:
        stmt = (
            select(AuditEntry)
            .where(device_audit_log_table.c.session_id == session_id)
            .order_by(device_audit_log_table.c.performed_at, device_audit_log_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def count_older_than(self, cutoff: datetime) -> int:
        stmt = (
            select(func.count())
            .select_from(device_audit_log_table)
            .where(device_audit_log_table.c.performed_at < cutoff)
        )
        return int(self.session.execute(stmt).scalar_one())

    def purge_older_than(self, cutoff: datetime) -> int:
        stmt = delete(device_audit_log_table).where(device_audit_log_table.c.performed_at < cutoff)
        result = self.session.execute(stmt)
        return int(result.rowcount)  # pyright: ignore[reportAttributeAccessIssue]
