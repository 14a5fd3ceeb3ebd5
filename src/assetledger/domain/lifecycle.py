"""Device lifecycle transitions and their audit entries.

Every transition runs in its own unit of work. The audit entry for a transition is
written in the same transaction as the primary change, inside a savepoint, so a failing
audit write is logged and the primary change still commits.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Final

from assetledger.domain.audit_trail import AuditTrail, utcnow
from assetledger.domain.errors import NotFoundError, ValidationError
from assetledger.domain.model import (
    CONTENT_FIELDS,
    ArchivedDevice,
    AuditAction,
    AuditEntry,
    copy_device,
    device_snapshot,
)

if TYPE_CHECKING:
    from uuid import UUID

    from assetledger.domain.audit_trail import Clock, UnitOfWorkFactory
    from assetledger.domain.model import Device
    from assetledger.domain.session import AuditStamp, SessionContext

log = logging.getLogger(__name__)

type DeviceTransform = Callable[[Device], Device]

DEFAULT_DISCOVERY_METHOD: Final[str] = "Manual"

CREATE_REASON: Final[str] = "New device added to inventory"
UPDATE_REASON: Final[str] = "Device updated via application"
MERGE_REASON: Final[str] = "Duplicate device data merged"
DELETE_REASON: Final[str] = "Device deleted via application"
RESTORE_REASON: Final[str] = "Device restored from archive"
MANUAL_AUDIT_REASON: Final[str] = "Manual audit entry"


def require_hostname(device: Device) -> None:
    if not device.hostname or not device.hostname.strip():
        raise ValidationError("Hostname is required and cannot be empty.", field="hostname")


def changed_fields(before: Device, after: Device) -> tuple[str, ...]:
    return tuple(name for name in CONTENT_FIELDS if getattr(before, name) != getattr(after, name))


def deletion_summary(device: Device) -> str:
    return (
        f"Device removed: {device.hostname} ({device.manufacturer} {device.model})"
        f" - IP: {device.primary_ip or 'N/A'}"
    )


class DeviceLifecycle:
    def __init__(
        self,
        *,
        unit_of_work_factory: UnitOfWorkFactory,
        context: SessionContext,
        audit: AuditTrail | None = None,
        clock: Clock = utcnow,
        default_discovery_method: str = DEFAULT_DISCOVERY_METHOD,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self.context = context
        self.clock = clock
        self.audit = audit or AuditTrail(unit_of_work_factory=unit_of_work_factory, clock=clock)
        self._default_discovery_method = default_discovery_method

    # Reads ---------------------------------------------------------------------

    def get(self, device_id: int) -> Device | None:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.devices.get(device_id)

    def archived(self, *, include_restored: bool = False) -> list[ArchivedDevice]:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.archive.list_archived(include_restored=include_restored)

    def archive_for_device(self, device_id: int) -> ArchivedDevice | None:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.archive.latest_for_device(device_id)

    # Transitions ---------------------------------------------------------------

    def create(
        self,
        device: Device,
        *,
        session_id: UUID | None = None,
        actor: str | None = None,
        reason: str | None = None,
    ) -> Device:
        """Absent -> Active."""

        require_hostname(device)
        stamp = self.context.stamp(
            default_reason=CREATE_REASON, session_id=session_id, actor=actor, reason=reason
        )
        now = self.clock()
        fresh = copy_device(device, keep_id=False)
        fresh.created_at = now
        fresh.updated_at = now
        fresh.last_discovered = device.last_discovered or now
        fresh.discovery_method = device.discovery_method or self._default_discovery_method

        with self._unit_of_work_factory() as uow:
            uow.repositories.devices.add(fresh)
            self.audit.record(
                uow,
                self._entry(
                    fresh.id,
                    AuditAction.CREATE,
                    stamp,
                    field_name="DEVICE_CREATED",
                    new_value=f"Device created: {fresh.describe()}",
                ),
            )
            uow.commit()
        log.info("Created device %s (id=%s)", fresh.hostname, fresh.id)
        return fresh

    def replace(
        self,
        device_id: int,
        values: Device,
        *,
        session_id: UUID | None = None,
        actor: str | None = None,
        reason: str | None = None,
    ) -> Device:
        """Overwrite every field of a stored device, keeping its id and creation time."""

        def transform(existing: Device) -> Device:
            replacement = copy_device(values)
            replacement.id = existing.id
            replacement.created_at = existing.created_at
            replacement.last_discovered = values.last_discovered or self.clock()
            replacement.discovery_method = (
                values.discovery_method
                or existing.discovery_method
                or self._default_discovery_method
            )
            return replacement

        return self.update(
            device_id,
            transform,
            default_reason=UPDATE_REASON,
            session_id=session_id,
            actor=actor,
            reason=reason,
        )

    def update(
        self,
        device_id: int,
        transform: DeviceTransform,
        *,
        default_reason: str = UPDATE_REASON,
        merged_fields: tuple[str, ...] | None = None,
        session_id: UUID | None = None,
        actor: str | None = None,
        reason: str | None = None,
    ) -> Device:
        """Active -> Active.

        ``transform`` receives a detached copy of the stored device and returns the full
        replacement. ``merged_fields`` marks the update as a merge and adds a MERGE entry.
        """

        stamp = self.context.stamp(
            default_reason=default_reason, session_id=session_id, actor=actor, reason=reason
        )
        self._record_update_started(device_id, stamp)

        with self._unit_of_work_factory() as uow:
            devices = uow.repositories.devices
            existing = devices.get(device_id)
            if existing is None:
                raise NotFoundError(f"Device {device_id} not found")
            before = copy_device(existing)
            replacement = transform(copy_device(existing))
            require_hostname(replacement)
            replacement.id = device_id
            replacement.updated_at = self.clock()
            changes = changed_fields(before, replacement)
            stored = devices.replace(device_id, replacement)

            self.audit.record(
                uow,
                self._entry(
                    device_id,
                    AuditAction.UPDATE_COMPLETED,
                    stamp,
                    field_name="DEVICE_UPDATED",
                    old_value=before.describe(),
                    new_value=f"Changed fields: {', '.join(changes) or 'none'}",
                ),
            )
            if merged_fields is not None:
                self.audit.record(
                    uow,
                    self._entry(
                        device_id,
                        AuditAction.MERGE,
                        stamp,
                        field_name="DEVICE_MERGED",
                        old_value=", ".join(merged_fields) or None,
                        new_value=f"Merged fields: {', '.join(changes) or 'none'}",
                    ),
                )
            uow.commit()
        log.info("Updated device %s (id=%s): %s", stored.hostname, device_id, changes)
        return stored

    def delete(
        self,
        device_id: int,
        *,
        reason: str | None = None,
        session_id: UUID | None = None,
        actor: str | None = None,
    ) -> ArchivedDevice:
        """Active -> Archived: snapshot the device, then remove it from the active set."""

        stamp = self.context.stamp(
            default_reason=DELETE_REASON, session_id=session_id, actor=actor, reason=reason
        )
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            device = repositories.devices.get(device_id)
            if device is None:
                raise NotFoundError(f"Device {device_id} not found")
            archived = ArchivedDevice(
                original_device_id=device_id,
                hostname=device.hostname,
                snapshot=device_snapshot(device),
                deleted_by=stamp.performed_by,
                deletion_reason=stamp.reason,
                session_id=stamp.session_id,
                deleted_at=self.clock(),
            )
            repositories.archive.add(archived)
            summary = deletion_summary(device)
            repositories.devices.remove(device)
            self.audit.record(
                uow,
                self._entry(
                    device_id,
                    AuditAction.DELETE,
                    stamp,
                    field_name="DEVICE_DELETED",
                    old_value=summary,
                    new_value=f"Device archived (archive id {archived.id})",
                ),
            )
            uow.commit()
        log.info(
            "Archived device %s (id=%s) as archive %s", archived.hostname, device_id, archived.id
        )
        return archived

    def restore(
        self,
        archive_id: int,
        *,
        reason: str | None = None,
        session_id: UUID | None = None,
        actor: str | None = None,
    ) -> Device:
        """Archived -> Active under a new id; the archive copy is marked restored."""

        stamp = self.context.stamp(
            default_reason=RESTORE_REASON, session_id=session_id, actor=actor, reason=reason
        )
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            archived = repositories.archive.get(archive_id)
            if archived is None:
                raise NotFoundError(f"Archived device {archive_id} not found")
            if archived.is_restored:
                raise NotFoundError(
                    f"Archived device {archive_id} was already restored"
                    f" as device {archived.restored_device_id}"
                )
            device = archived.to_device()
            require_hostname(device)
            now = self.clock()
            device.updated_at = now
            repositories.devices.add(device)
            archived.mark_restored(
                device_id=device.id, restored_by=stamp.performed_by, restored_at=now
            )
            self.audit.record(
                uow,
                self._entry(
                    device.id,
                    AuditAction.RESTORE,
                    stamp,
                    field_name="DEVICE_RESTORED",
                    old_value=f"Archive {archive_id} (device {archived.original_device_id})",
                    new_value=f"Device restored: {device.describe()}",
                ),
            )
            uow.commit()
        log.info("Restored archive %s as device %s (id=%s)", archive_id, device.hostname, device.id)
        return device

    def log_audit_entry(
        self,
        device_id: int | None,
        action: AuditAction,
        *,
        field_name: str | None = None,
        old_value: str | None = None,
        new_value: str | None = None,
        reason: str | None = None,
        session_id: UUID | None = None,
        actor: str | None = None,
    ) -> AuditEntry:
        """Write one standalone entry; raises ``AuditWriteFailure`` when it cannot."""

        stamp = self.context.stamp(
            default_reason=MANUAL_AUDIT_REASON, session_id=session_id, actor=actor, reason=reason
        )
        entry = self._entry(
            device_id,
            action,
            stamp,
            field_name=field_name,
            old_value=old_value,
            new_value=new_value,
        )
        with self._unit_of_work_factory() as uow:
            self.audit.append(uow, entry)
            uow.commit()
        return entry

    # Helpers -------------------------------------------------------------------

    def _record_update_started(self, device_id: int, stamp: AuditStamp) -> None:
        with self._unit_of_work_factory() as uow:
            if uow.repositories.devices.get(device_id) is None:
                raise NotFoundError(f"Device {device_id} not found")
            recorded = self.audit.record(
                uow,
                self._entry(
                    device_id, AuditAction.UPDATE_STARTED, stamp, field_name="DEVICE_UPDATE"
                ),
            )
            if recorded:
                uow.commit()

    def _entry(
        self,
        device_id: int | None,
        action: AuditAction,
        stamp: AuditStamp,
        *,
        field_name: str | None = None,
        old_value: str | None = None,
        new_value: str | None = None,
    ) -> AuditEntry:
        return AuditEntry(
            device_id=device_id,
            action=action,
            session_id=stamp.session_id,
            performed_by=stamp.performed_by,
            reason=stamp.reason,
            field_name=field_name,
            old_value=old_value,
            new_value=new_value,
            performed_at=self.clock(),
        )
