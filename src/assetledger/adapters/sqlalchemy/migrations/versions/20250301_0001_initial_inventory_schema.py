"""Initial inventory schema: devices, archived devices and the audit log.

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2025-03-01 09:00:00.000000
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "3f1c2a9d7b40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEVICE_TYPES = ("PRINTER", "CAMERA", "PC", "SERVER", "ROUTER", "SWITCH", "OTHER")
DEVICE_STATUSES = ("ACTIVE", "INACTIVE", "MAINTENANCE", "MISSING", "RETIRED")
AUDIT_ACTIONS = (
    "CREATE",
    "UPDATE_STARTED",
    "UPDATE_COMPLETED",
    "DELETE",
    "MERGE",
    "RESTORE",
)


def _nic_prefix(slot: int) -> str:
    return "primary" if slot == 1 else f"nic{slot}"


def _nic_columns(slot: int) -> list[sa.Column[str]]:
    prefix = _nic_prefix(slot)
    name = "primary_nic_name" if slot == 1 else f"{prefix}_name"
    return [
        sa.Column(name, sa.String(length=255), nullable=True),
        sa.Column(f"{prefix}_ip", sa.String(length=45), nullable=True),
        sa.Column(f"{prefix}_mac", sa.String(length=32), nullable=True),
        sa.Column(f"{prefix}_subnet", sa.String(length=45), nullable=True),
    ]


def _drive_columns(slot: int) -> list[sa.Column[str]]:
    return [
        sa.Column(f"drive{slot}_name", sa.String(length=255), nullable=True),
        sa.Column(f"drive{slot}_capacity", sa.String(length=64), nullable=True),
        sa.Column(f"drive{slot}_type", sa.String(length=64), nullable=True),
        sa.Column(f"drive{slot}_model", sa.String(length=255), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "device",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("hostname", sa.String(length=255), nullable=False),
        sa.Column("serial_number", sa.String(length=255), nullable=True),
        sa.Column("asset_tag", sa.String(length=100), nullable=True),
        sa.Column(
            "device_type",
            sa.Enum(*DEVICE_TYPES, name="devicetype", native_enum=False),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum(*DEVICE_STATUSES, name="devicestatus", native_enum=False),
            nullable=False,
        ),
        sa.Column("equipment_group", sa.String(length=100), nullable=True),
        sa.Column("domain_name", sa.String(length=255), nullable=True),
        sa.Column("workgroup", sa.String(length=255), nullable=True),
        sa.Column("is_domain_joined", sa.Boolean(), nullable=True),
        sa.Column("manufacturer", sa.String(length=255), nullable=True),
        sa.Column("model", sa.String(length=255), nullable=True),
        sa.Column("cpu_info", sa.String(length=255), nullable=True),
        sa.Column("total_ram_gb", sa.Float(), nullable=False),
        sa.Column("ram_type", sa.String(length=64), nullable=True),
        sa.Column("ram_speed", sa.String(length=64), nullable=True),
        sa.Column("ram_manufacturer", sa.String(length=255), nullable=True),
        sa.Column("bios_version", sa.String(length=255), nullable=True),
        sa.Column("storage_info", sa.String(length=255), nullable=True),
        sa.Column("os_name", sa.String(length=255), nullable=True),
        sa.Column("os_version", sa.String(length=255), nullable=True),
        sa.Column("os_architecture", sa.String(length=64), nullable=True),
        sa.Column("os_install_date", sa.DateTime(timezone=True), nullable=True),
        *(column for slot in (1, 2, 3, 4) for column in _drive_columns(slot)),
        *(column for slot in (1, 2, 3, 4) for column in _nic_columns(slot)),
        sa.Column("primary_dns", sa.String(length=45), nullable=True),
        sa.Column("secondary_dns", sa.String(length=45), nullable=True),
        sa.Column("web_interface_url", sa.String(length=500), nullable=True),
        sa.Column("area", sa.String(length=100), nullable=True),
        sa.Column("zone", sa.String(length=100), nullable=True),
        sa.Column("line", sa.String(length=100), nullable=True),
        sa.Column("pitch", sa.String(length=100), nullable=True),
        sa.Column("floor", sa.String(length=100), nullable=True),
        sa.Column("pillar", sa.String(length=100), nullable=True),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_discovered", sa.DateTime(timezone=True), nullable=True),
        sa.Column("discovery_method", sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_device")),
    )
    op.create_index("ix_device_hostname", "device", ["hostname"])
    op.create_index("ix_device_serial_number", "device", ["serial_number"])
    op.create_index("ix_device_asset_tag", "device", ["asset_tag"])

    op.create_table(
        "deleted_device",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("original_device_id", sa.Integer(), nullable=False),
        sa.Column("hostname", sa.String(length=255), nullable=False),
        sa.Column("snapshot", sa.JSON(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_by", sa.String(length=255), nullable=False),
        sa.Column("deletion_reason", sa.Text(), nullable=False),
        sa.Column("session_id", sa.Uuid(), nullable=False),
        sa.Column("restored_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("restored_device_id", sa.Integer(), nullable=True),
        sa.Column("restored_by", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_deleted_device")),
    )
    op.create_index(
        "ix_deleted_device_original_device_id", "deleted_device", ["original_device_id"]
    )

    op.create_table(
        "device_audit_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("device_id", sa.Integer(), nullable=True),
        sa.Column(
            "action_type",
            sa.Enum(*AUDIT_ACTIONS, name="auditaction", native_enum=False),
            nullable=False,
        ),
        sa.Column("field_name", sa.String(length=100), nullable=True),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("performed_by", sa.String(length=255), nullable=False),
        sa.Column("performed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("change_reason", sa.Text(), nullable=False),
        sa.Column("session_id", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_device_audit_log")),
    )
    op.create_index("ix_device_audit_log_device_id", "device_audit_log", ["device_id"])
    op.create_index("ix_device_audit_log_session_id", "device_audit_log", ["session_id"])
    op.create_index("ix_device_audit_log_performed_at", "device_audit_log", ["performed_at"])


def downgrade() -> None:
    op.drop_index("ix_device_audit_log_performed_at", table_name="device_audit_log")
    op.drop_index("ix_device_audit_log_session_id", table_name="device_audit_log")
    op.drop_index("ix_device_audit_log_device_id", table_name="device_audit_log")
    op.drop_table("device_audit_log")
    op.drop_index("ix_deleted_device_original_device_id", table_name="deleted_device")
    op.drop_table("deleted_device")
    op.drop_index("ix_device_asset_tag", table_name="device")
    op.drop_index("ix_device_serial_number", table_name="device")
    op.drop_index("ix_device_hostname", table_name="device")
    op.drop_table("device")
