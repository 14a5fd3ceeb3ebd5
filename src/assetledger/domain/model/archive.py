"""Archive copies of deleted devices."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from .device import device_from_snapshot

if TYPE_CHECKING:
    from uuid import UUID

    from .device import Device


@dataclass(eq=False, kw_only=True)
class ArchivedDevice:
    """Point-in-time copy of a device taken when it was deleted."""

    original_device_id: int
    hostname: str
    snapshot: dict[str, Any]
    deleted_by: str
    deletion_reason: str
    session_id: UUID
    deleted_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    restored_at: datetime | None = None
    restored_device_id: int | None = None
    restored_by: str | None = None
    id: int | None = None

    @property
    def is_restored(self) -> bool:
        return self.restored_at is not None

    def to_device(self) -> Device:
        """Transient device rebuilt from the snapshot, without its old id."""

        device = device_from_snapshot(self.snapshot)
        device.id = None
        return device

    def mark_restored(
        self, *, device_id: int | None, restored_by: str, restored_at: datetime
    ) -> None:
        self.restored_device_id = device_id
        self.restored_by = restored_by
        self.restored_at = restored_at
