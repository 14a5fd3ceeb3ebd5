"""Public entry points of the inventory core.

``DeviceInventory`` sequences sanitize -> detect -> (caller decision) -> resolve -> audit
and turns expected failures into result objects. Only an unreachable store raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from assetledger.domain.audit_trail import DEFAULT_RETENTION_DAYS, AuditPurgeResult
from assetledger.domain.errors import (
    AuditWriteFailure,
    InventoryError,
    NotFoundError,
    PersistenceError,
    StaleDetectionError,
    StoreUnavailableError,
    ValidationError,
)
from assetledger.domain.identity import DuplicateDetectionResult, detect_duplicates
from assetledger.domain.locks import HostnameLocks
from assetledger.domain.model import ActionTaken, AuditAction, ErrorCode, ResolutionAction
from assetledger.domain.resolution import ResolutionDecision, resolve_duplicate

if TYPE_CHECKING:
    from uuid import UUID

    from assetledger.domain.audit_trail import UnitOfWorkFactory
    from assetledger.domain.lifecycle import DeviceLifecycle
    from assetledger.domain.model import ArchivedDevice, AuditEntry, Device, DeviceType
    from assetledger.domain.resolution import ResolutionResult
    from assetledger.domain.sanitize import Sanitizer

log = logging.getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class AddResult:
    success: bool
    message: str
    action_taken: ActionTaken
    duplicates_found: bool = False
    detection_result: DuplicateDetectionResult | None = None
    device_id: int | None = None
    device: Device | None = None
    error: str | None = None
    error_code: ErrorCode | None = None

    @property
    def awaiting_resolution(self) -> bool:
        return self.action_taken is ActionTaken.AWAITING_RESOLUTION


@dataclass(slots=True, kw_only=True)
class OperationResult:
    """Outcome of a single lifecycle call; truthy when it succeeded."""

    success: bool
    message: str
    device_id: int | None = None
    archive_id: int | None = None
    error: str | None = None
    error_code: ErrorCode | None = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def failed(cls, message: str, code: ErrorCode) -> OperationResult:
        return cls(success=False, message=message, error=message, error_code=code)


def _failure(exc: InventoryError) -> OperationResult:
    if isinstance(exc, ValidationError):
        return OperationResult.failed(str(exc), ErrorCode.VALIDATION)
    if isinstance(exc, NotFoundError):
        return OperationResult.failed(str(exc), ErrorCode.NOT_FOUND)
    if isinstance(exc, PersistenceError) and exc.is_conflict:
        return OperationResult.failed(str(exc), ErrorCode.CONFLICT)
    return OperationResult.failed(str(exc), ErrorCode.PERSISTENCE)


def _check_detection_token(
    resolution: ResolutionDecision, detection: DuplicateDetectionResult | None
) -> None:
    if resolution.detection_token is None or detection is None:
        return
    if resolution.detection_token != detection.token:
        raise StaleDetectionError(
            "Stored devices changed since duplicate detection; detect again and retry."
        )


class DeviceInventory:
    def __init__(
        self,
        *,
        lifecycle: DeviceLifecycle,
        unit_of_work_factory: UnitOfWorkFactory,
        sanitizer: Sanitizer,
        locks: HostnameLocks | None = None,
    ) -> None:
        self.lifecycle = lifecycle
        self._unit_of_work_factory = unit_of_work_factory
        self._sanitizer = sanitizer
        self._locks = locks or HostnameLocks()

    # Detection and add ---------------------------------------------------------

    def detect(self, device: Device) -> DuplicateDetectionResult:
        with self._unit_of_work_factory() as uow:
            return detect_duplicates(device, devices=uow.repositories.devices)

    def add_with_duplicate_check(
        self,
        device: Device,
        device_type: str | DeviceType | None = None,
        *,
        check_duplicates: bool = True,
        resolution: ResolutionDecision | None = None,
        session_id: UUID | None = None,
        actor: str | None = None,
    ) -> AddResult:
        """Add a device, stopping for a caller decision when it collides with stored ones.

        Without ``resolution`` a collision returns ``AWAITING_RESOLUTION`` and the detection
        result; the caller resubmits with a decision, optionally carrying the detection
        token so a decision taken on stale matches is refused.
        """

        try:
            candidate = self._sanitize(device, device_type)
        except ValidationError as exc:
            return AddResult(
                success=False,
                message=str(exc),
                action_taken=ActionTaken.FAILED,
                error=str(exc),
                error_code=ErrorCode.VALIDATION,
            )

        with self._locks.hold(candidate.hostname):
            detection = self.detect(candidate) if check_duplicates else None
            duplicates_found = detection is not None and detection.has_duplicates

            if resolution is not None:
                return self._apply_resolution(
                    candidate, resolution, detection, session_id=session_id, actor=actor
                )

            if detection is not None and detection.has_duplicates:
                count = len(detection.matches)
                log.info("Add of %s halted: %d potential duplicate(s)", candidate.hostname, count)
                return AddResult(
                    success=False,
                    message=f"Found {count} potential duplicate(s). User action required.",
                    action_taken=ActionTaken.AWAITING_RESOLUTION,
                    duplicates_found=True,
                    detection_result=detection,
                )

            outcome = resolve_duplicate(
                candidate,
                ResolutionDecision.create_new(),
                lifecycle=self.lifecycle,
                session_id=session_id,
                actor=actor,
            )
            return self._add_result(outcome, detection, duplicates_found=duplicates_found)

    def _apply_resolution(
        self,
        candidate: Device,
        resolution: ResolutionDecision,
        detection: DuplicateDetectionResult | None,
        *,
        session_id: UUID | None,
        actor: str | None,
    ) -> AddResult:
        duplicates_found = detection is not None and detection.has_duplicates
        try:
            _check_detection_token(resolution, detection)
        except StaleDetectionError as exc:
            log.info("Stale resolution for %s refused", candidate.hostname)
            message = str(exc)
            return AddResult(
                success=False,
                message=message,
                action_taken=ActionTaken.FAILED,
                duplicates_found=duplicates_found,
                detection_result=detection,
                error=message,
                error_code=ErrorCode.STALE_DETECTION,
            )
        outcome = resolve_duplicate(
            candidate, resolution, lifecycle=self.lifecycle, session_id=session_id, actor=actor
        )
        return self._add_result(outcome, detection, duplicates_found=duplicates_found)

    def _add_result(
        self,
        outcome: ResolutionResult,
        detection: DuplicateDetectionResult | None,
        *,
        duplicates_found: bool,
    ) -> AddResult:
        device = outcome.device
        return AddResult(
            success=outcome.succeeded,
            message=outcome.message,
            action_taken=outcome.outcome,
            duplicates_found=duplicates_found,
            detection_result=detection,
            device_id=device.id if device is not None else None,
            device=device,
            error=outcome.error,
            error_code=outcome.error_code,
        )

    def _sanitize(self, device: Device, device_type: str | DeviceType | None) -> Device:
        candidate = self._sanitizer.sanitize(device)
        if device_type is not None:
            candidate.device_type = self._sanitizer.sanitize_device_type(device_type)
        if not candidate.hostname:
            raise ValidationError("Hostname is required and cannot be empty.", field="hostname")
        return candidate

    # Lifecycle -----------------------------------------------------------------

    def merge(
        self,
        existing: Device,
        candidate: Device,
        resolution: ResolutionDecision,
        *,
        session_id: UUID | None = None,
        actor: str | None = None,
    ) -> OperationResult:
        """Merge ``candidate`` into ``existing`` using the decision's field selection."""

        decision = ResolutionDecision(
            action=ResolutionAction.MERGE_DATA,
            target_device=existing,
            fields_to_merge=resolution.fields_to_merge,
            reason=resolution.reason,
            preserve_existing=resolution.preserve_existing,
        )
        outcome = resolve_duplicate(
            candidate, decision, lifecycle=self.lifecycle, session_id=session_id, actor=actor
        )
        return OperationResult(
            success=outcome.succeeded,
            message=outcome.message,
            device_id=existing.id,
            error=outcome.error,
            error_code=outcome.error_code,
        )

    def update(
        self,
        device: Device,
        *,
        reason: str | None = None,
        session_id: UUID | None = None,
        actor: str | None = None,
    ) -> OperationResult:
        """Replace every field of the stored device with the same id."""

        device_id = device.id
        if device_id is None:
            return OperationResult.failed("Device has no id to update", ErrorCode.MISSING_TARGET)
        try:
            updated = self.lifecycle.replace(
                device_id,
                self._sanitize(device, None),
                reason=reason,
                session_id=session_id,
                actor=actor,
            )
        except StoreUnavailableError:
            raise
        except InventoryError as exc:
            return _failure(exc)
        return OperationResult(
            success=True,
            message=f"Successfully updated device: {updated.hostname}",
            device_id=device_id,
        )

    def delete(
        self,
        device_id: int,
        reason: str | None = None,
        *,
        session_id: UUID | None = None,
        actor: str | None = None,
    ) -> OperationResult:
        try:
            archived = self.lifecycle.delete(
                device_id, reason=reason, session_id=session_id, actor=actor
            )
        except StoreUnavailableError:
            raise
        except InventoryError as exc:
            return _failure(exc)
        return OperationResult(
            success=True,
            message=f"Device {archived.hostname} archived",
            device_id=device_id,
            archive_id=archived.id,
        )

    def restore(
        self,
        archive_id: int,
        reason: str | None = None,
        *,
        session_id: UUID | None = None,
        actor: str | None = None,
    ) -> OperationResult:
        try:
            device = self.lifecycle.restore(
                archive_id, reason=reason, session_id=session_id, actor=actor
            )
        except StoreUnavailableError:
            raise
        except InventoryError as exc:
            return _failure(exc)
        return OperationResult(
            success=True,
            message=f"Device {device.hostname} restored",
            device_id=device.id,
            archive_id=archive_id,
        )

    def log_audit_entry(
        self,
        device_id: int | None,
        action: AuditAction | str,
        field_name: str | None = None,
        old_value: str | None = None,
        new_value: str | None = None,
        reason: str | None = None,
        *,
        session_id: UUID | None = None,
        actor: str | None = None,
    ) -> OperationResult:
        """Best-effort standalone audit entry; failures are logged, never raised."""

        try:
            parsed = AuditAction(str(action).strip().upper())
        except ValueError:
            return OperationResult.failed(f"Unknown audit action: {action}", ErrorCode.VALIDATION)
        try:
            entry = self.lifecycle.log_audit_entry(
                device_id,
                parsed,
                field_name=field_name,
                old_value=old_value,
                new_value=new_value,
                reason=reason,
                session_id=session_id,
                actor=actor,
            )
        except (AuditWriteFailure, PersistenceError) as exc:
            log.warning("Audit entry for device %s not written: %s", device_id, exc)
            return OperationResult.failed(str(exc), ErrorCode.PERSISTENCE)
        return OperationResult(
            success=True, message="Audit entry written", device_id=entry.device_id
        )

    # Queries -------------------------------------------------------------------

    def get_device(self, device_id: int) -> Device | None:
        return self.lifecycle.get(device_id)

    def archived_devices(self, *, include_restored: bool = False) -> list[ArchivedDevice]:
        return self.lifecycle.archived(include_restored=include_restored)

    def archive_for_device(self, device_id: int) -> ArchivedDevice | None:
        return self.lifecycle.archive_for_device(device_id)

    def audit_history(self, device_id: int) -> list[AuditEntry]:
        return self.lifecycle.audit.history(device_id)

    def session_entries(self, session_id: UUID) -> list[AuditEntry]:
        return self.lifecycle.audit.session_entries(session_id)

    def purge_audit_log(
        self, *, retention_days: int = DEFAULT_RETENTION_DAYS, dry_run: bool = True
    ) -> AuditPurgeResult:
        return self.lifecycle.audit.purge(retention_days=retention_days, dry_run=dry_run)

