"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from assetledger.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyInventoryUnitOfWork,
    is_started,
    startup,
)
from assetledger.adapters.validation import DefaultSanitizer
from assetledger.config import InventoryConfig, get_inventory_config
from assetledger.domain.inventory import DeviceInventory
from assetledger.domain.lifecycle import DeviceLifecycle
from assetledger.domain.model import ActionTaken
from assetledger.domain.ports.unit_of_work import InventoryUnitOfWork
from assetledger.domain.session import ApplicationSession, SessionContext

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from assetledger.domain.model import Device
    from assetledger.domain.sanitize import Sanitizer
    from assetledger.domain.session import CurrentActor

UnitOfWorkFactory = Callable[[], InventoryUnitOfWork]

log = getLogger(__name__)

# One correlation id per process run; audit entries default to it.
APPLICATION_SESSION = ApplicationSession()


def create_inventory(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    session: ApplicationSession | None = None,
    current_actor: CurrentActor | None = None,
    sanitizer: Sanitizer | None = None,
    clock: Callable[[], datetime] | None = None,
    config: InventoryConfig | None = None,
) -> DeviceInventory:
    """Wire the inventory core against the configured SQLAlchemy store."""

    if unit_of_work_factory is None and not is_started():
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemyInventoryUnitOfWork
    effective_config = config or get_inventory_config()
    context = SessionContext(
        application=session or APPLICATION_SESSION, current_actor=current_actor
    )
    lifecycle_kwargs = {"clock": clock} if clock is not None else {}
    lifecycle = DeviceLifecycle(
        unit_of_work_factory=effective_uow,
        context=context,
        default_discovery_method=effective_config.default_discovery_method,
        **lifecycle_kwargs,
    )
    log.debug("Inventory ready (%s)", context.application.info)
    return DeviceInventory(
        lifecycle=lifecycle,
        unit_of_work_factory=effective_uow,
        sanitizer=sanitizer or DefaultSanitizer(),
    )


@dataclass(slots=True)
class DiscoverySummary:
    """Counters for one discovery sweep, all sharing ``session_id`` in the audit log."""

    session_id: UUID
    added: int = 0
    already_exists: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list[str])

    @property
    def total(self) -> int:
        return self.added + self.already_exists + self.failed + self.skipped


def register_discovered_devices(
    devices: Iterable[Device],
    *,
    inventory: DeviceInventory | None = None,
    discovery_session_id: UUID | None = None,
    device_type: str | None = None,
    actor: str | None = None,
) -> DiscoverySummary:
    """Add scanned devices one by one; collisions are counted, never resolved here."""

    effective_inventory = inventory or create_inventory()
    summary = DiscoverySummary(session_id=discovery_session_id or uuid4())
    log.info("Starting discovery registration: session=%s", summary.session_id)

    for device in devices:
        if not device.hostname or not device.hostname.strip():
            summary.skipped += 1
            continue
        result = effective_inventory.add_with_duplicate_check(
            device,
            device_type,
            session_id=summary.session_id,
            actor=actor,
        )
        if result.success:
            summary.added += 1
        elif result.action_taken is ActionTaken.AWAITING_RESOLUTION:
            summary.already_exists += 1
        else:
            summary.failed += 1
            summary.errors.append(f"{device.hostname}: {result.error or result.message}")

    log.info(
        "Finished discovery registration: added=%s, already_exists=%s, failed=%s, skipped=%s",
        summary.added,
        summary.already_exists,
        summary.failed,
        summary.skipped,
    )
    return summary
