"""Audit records for device lifecycle transitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from .enums import AuditAction


@dataclass(eq=False, kw_only=True)
class AuditEntry:
    """Append-only record of one state change, attributed to an actor and a session."""

    device_id: int | None
    action: AuditAction
    session_id: UUID
    performed_by: str
    reason: str
    field_name: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    performed_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    id: int | None = None
