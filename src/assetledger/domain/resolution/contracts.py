"""Resolution decisions and outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from assetledger.domain.model import ActionTaken, ResolutionAction

if TYPE_CHECKING:
    from assetledger.domain.model import Device, ErrorCode, MergeField


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolutionDecision:
    """Caller instruction for a candidate that collided with stored devices.

    ``fields_to_merge`` takes concrete field names or category tokens such as
    ``all_network``. ``detection_token`` is the token of the detection result the caller
    decided on; when given, the decision is rejected if the matches changed since.
    """

    action: ResolutionAction
    target_device: Device | None = None
    fields_to_merge: tuple[str, ...] = ()
    reason: str | None = None
    preserve_existing: bool = False
    detection_token: str | None = None

    @classmethod
    def cancel(cls, reason: str | None = None) -> ResolutionDecision:
        return cls(action=ResolutionAction.CANCEL, reason=reason)

    @classmethod
    def create_new(cls, reason: str | None = None) -> ResolutionDecision:
        return cls(action=ResolutionAction.CREATE_NEW, reason=reason)

    @classmethod
    def update_existing(cls, target: Device, reason: str | None = None) -> ResolutionDecision:
        return cls(action=ResolutionAction.UPDATE_EXISTING, target_device=target, reason=reason)

    @classmethod
    def merge_data(
        cls,
        target: Device,
        fields_to_merge: tuple[str, ...] | list[str],
        *,
        reason: str | None = None,
        preserve_existing: bool = False,
    ) -> ResolutionDecision:
        return cls(
            action=ResolutionAction.MERGE_DATA,
            target_device=target,
            fields_to_merge=tuple(fields_to_merge),
            reason=reason,
            preserve_existing=preserve_existing,
        )


@dataclass(frozen=True, slots=True)
class MergeSelection:
    """Parsed ``fields_to_merge``: recognised fields in order plus ignored tokens."""

    fields: tuple[MergeField, ...] = ()
    ignored: tuple[str, ...] = ()

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(str(name) for name in self.fields)


@dataclass(slots=True, kw_only=True)
class MergeOutcome:
    device: Device
    changed_fields: tuple[str, ...] = field(default_factory=tuple)


@dataclass(slots=True, kw_only=True)
class ResolutionResult:
    outcome: ActionTaken
    message: str
    device: Device | None = None
    error: str | None = None
    error_code: ErrorCode | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome in {ActionTaken.ADDED, ActionTaken.UPDATED, ActionTaken.MERGED}
