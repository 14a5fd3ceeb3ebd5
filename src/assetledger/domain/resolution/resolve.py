"""Execution of a caller's resolution decision."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from assetledger.domain.errors import (
    NotFoundError,
    PersistenceError,
    StoreUnavailableError,
    ValidationError,
)
from assetledger.domain.lifecycle import MERGE_REASON
from assetledger.domain.model import ActionTaken, ErrorCode, ResolutionAction

from .contracts import ResolutionResult
from .merge import merge_device, parse_merge_selection

if TYPE_CHECKING:
    from uuid import UUID

    from assetledger.domain.lifecycle import DeviceLifecycle
    from assetledger.domain.model import Device

    from .contracts import ResolutionDecision

log = logging.getLogger(__name__)


def resolve_duplicate(
    candidate: Device,
    decision: ResolutionDecision,
    *,
    lifecycle: DeviceLifecycle,
    session_id: UUID | None = None,
    actor: str | None = None,
) -> ResolutionResult:
    """Create, replace or merge according to ``decision``.

    Expected failures come back as a ``FAILED`` result; only an unreachable store raises.
    """

    try:
        return _execute(
            candidate, decision, lifecycle=lifecycle, session_id=session_id, actor=actor
        )
    except StoreUnavailableError:
        raise
    except ValidationError as exc:
        return _failed(str(exc), ErrorCode.VALIDATION)
    except NotFoundError as exc:
        return _failed(str(exc), ErrorCode.NOT_FOUND)
    except PersistenceError as exc:
        log.warning("Resolution %s failed during write: %s", decision.action, exc)
        code = ErrorCode.CONFLICT if exc.is_conflict else ErrorCode.PERSISTENCE
        return _failed(f"Failed to save device: {exc}", code)


def _execute(
    candidate: Device,
    decision: ResolutionDecision,
    *,
    lifecycle: DeviceLifecycle,
    session_id: UUID | None,
    actor: str | None,
) -> ResolutionResult:
    match decision.action:
        case ResolutionAction.CANCEL:
            return ResolutionResult(
                outcome=ActionTaken.CANCELLED,
                message="Device addition cancelled due to duplicates.",
            )
        case ResolutionAction.CREATE_NEW:
            created = lifecycle.create(
                candidate, session_id=session_id, actor=actor, reason=decision.reason
            )
            return ResolutionResult(
                outcome=ActionTaken.ADDED,
                message=f"Successfully added device: {created.hostname}",
                device=created,
            )
        case ResolutionAction.UPDATE_EXISTING:
            target_id = _target_id(decision)
            if target_id is None:
                return _failed("No target device specified for update", ErrorCode.MISSING_TARGET)
            updated = lifecycle.replace(
                target_id,
                candidate,
                session_id=session_id,
                actor=actor,
                reason=decision.reason,
            )
            return ResolutionResult(
                outcome=ActionTaken.UPDATED,
                message=f"Successfully updated existing device: {updated.hostname}",
                device=updated,
            )
        case ResolutionAction.MERGE_DATA:
            target_id = _target_id(decision)
            if target_id is None:
                return _failed("No target device specified for merge", ErrorCode.MISSING_TARGET)
            selection = parse_merge_selection(decision.fields_to_merge)

            def transform(existing: Device) -> Device:
                return merge_device(
                    existing,
                    candidate,
                    selection,
                    now=lifecycle.clock(),
                    preserve_existing=decision.preserve_existing,
                ).device

            merged = lifecycle.update(
                target_id,
                transform,
                default_reason=MERGE_REASON,
                merged_fields=selection.field_names,
                session_id=session_id,
                actor=actor,
                reason=decision.reason,
            )
            return ResolutionResult(
                outcome=ActionTaken.MERGED,
                message=f"Successfully merged device data for: {merged.hostname}",
                device=merged,
            )
        case _:
            return _failed(
                f"Unsupported resolution action: {decision.action}", ErrorCode.VALIDATION
            )


def _target_id(decision: ResolutionDecision) -> int | None:
    target = decision.target_device
    if target is None:
        return None
    return target.id


def _failed(message: str, code: ErrorCode) -> ResolutionResult:
    return ResolutionResult(
        outcome=ActionTaken.FAILED,
        message=message,
        error=message,
        error_code=code,
    )
