"""SQLAlchemy mapping metadata for the inventory domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Final

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
)

from assetledger.domain.model import (
    ArchivedDevice,
    AuditAction,
    AuditEntry,
    Device,
    DeviceStatus,
    DeviceType,
    nic_attribute,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

NIC_SLOTS: Final[tuple[int, ...]] = (1, 2, 3, 4)
DRIVE_SLOTS: Final[tuple[int, ...]] = (1, 2, 3, 4)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _nic_columns(slot: int) -> list[Column[str]]:
    return [
        Column(nic_attribute(slot, "name"), String(255), nullable=True),
        Column(nic_attribute(slot, "ip"), String(45), nullable=True),
        Column(nic_attribute(slot, "mac"), String(32), nullable=True),
        Column(nic_attribute(slot, "subnet"), String(45), nullable=True),
    ]


def _drive_columns(slot: int) -> list[Column[str]]:
    return [
        Column(f"drive{slot}_name", String(255), nullable=True),
        Column(f"drive{slot}_capacity", String(64), nullable=True),
        Column(f"drive{slot}_type", String(64), nullable=True),
        Column(f"drive{slot}_model", String(255), nullable=True),
    ]


# Tables ------------------------------------------------------------------------

# Hostname is deliberately not unique: CreateNew may store a second record for it.
device_table = Table(
    "device",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("hostname", String(255), nullable=False),
    Column("serial_number", String(255), nullable=True),
    Column("asset_tag", String(100), nullable=True),
    Column("device_type", Enum(DeviceType, native_enum=False), nullable=False),
    Column("status", Enum(DeviceStatus, native_enum=False), nullable=False),
    Column("equipment_group", String(100), nullable=True),
    Column("domain_name", String(255), nullable=True),
    Column("workgroup", String(255), nullable=True),
    Column("is_domain_joined", Boolean, nullable=True),
    Column("manufacturer", String(255), nullable=True),
    Column("model", String(255), nullable=True),
    Column("cpu_info", String(255), nullable=True),
    Column("total_ram_gb", Float, nullable=False, default=0.0),
    Column("ram_type", String(64), nullable=True),
    Column("ram_speed", String(64), nullable=True),
    Column("ram_manufacturer", String(255), nullable=True),
    Column("bios_version", String(255), nullable=True),
    Column("storage_info", String(255), nullable=True),
    Column("os_name", String(255), nullable=True),
    Column("os_version", String(255), nullable=True),
    Column("os_architecture", String(64), nullable=True),
    Column("os_install_date", UTCDateTime(), nullable=True),
    *(column for slot in DRIVE_SLOTS for column in _drive_columns(slot)),
    *(column for slot in NIC_SLOTS for column in _nic_columns(slot)),
    Column("primary_dns", String(45), nullable=True),
    Column("secondary_dns", String(45), nullable=True),
    Column("web_interface_url", String(500), nullable=True),
    Column("area", String(100), nullable=True),
    Column("zone", String(100), nullable=True),
    Column("line", String(100), nullable=True),
    Column("pitch", String(100), nullable=True),
    Column("floor", String(100), nullable=True),
    Column("pillar", String(100), nullable=True),
    Column("additional_notes", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=True),
    Column("last_discovered", UTCDateTime(), nullable=True),
    Column("discovery_method", String(50), nullable=True),
    Index("ix_device_hostname", "hostname"),
    Index("ix_device_serial_number", "serial_number"),
    Index("ix_device_asset_tag", "asset_tag"),
)

# Snapshots outlive the device row, so there is no foreign key back to ``device``.
deleted_device_table = Table(
    "deleted_device",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("original_device_id", Integer, nullable=False),
    Column("hostname", String(255), nullable=False),
    Column("snapshot", JSON, nullable=False),
    Column("deleted_at", UTCDateTime(), nullable=False),
    Column("deleted_by", String(255), nullable=False),
    Column("deletion_reason", Text, nullable=False),
    Column("session_id", UUIDColumnType, nullable=False),
    Column("restored_at", UTCDateTime(), nullable=True),
    Column("restored_device_id", Integer, nullable=True),
    Column("restored_by", String(255), nullable=True),
    Index("ix_deleted_device_original_device_id", "original_device_id"),
)

device_audit_log_table = Table(
    "device_audit_log",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("device_id", Integer, nullable=True),
    Column("action_type", Enum(AuditAction, native_enum=False), key="action", nullable=False),
    Column("field_name", String(100), nullable=True),
    Column("old_value", Text, nullable=True),
    Column("new_value", Text, nullable=True),
    Column("performed_by", String(255), nullable=False),
    Column("performed_at", UTCDateTime(), nullable=False),
    Column("change_reason", Text, key="reason", nullable=False),
    Column("session_id", UUIDColumnType, nullable=False),
    Index("ix_device_audit_log_device_id", "device_id"),
    Index("ix_device_audit_log_session_id", "session_id"),
    Index("ix_device_audit_log_performed_at", "performed_at"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Device, device_table)
    mapper_registry.map_imperatively(ArchivedDevice, deleted_device_table)
    mapper_registry.map_imperatively(AuditEntry, device_audit_log_table)

    return mapper_registry
