from __future__ import annotations

from typing import TYPE_CHECKING, Any

from assetledger.domain.model import Device

if TYPE_CHECKING:
    from collections.abc import Callable

    from assetledger.adapters.sqlalchemy.unit_of_work import SqlAlchemyInventoryUnitOfWork
    from assetledger.domain.lifecycle import DeviceLifecycle


def make_device(hostname: str = "PC01", **overrides: Any) -> Device:
    values: dict[str, Any] = {
        "manufacturer": "Dell",
        "model": "OptiPlex 7090",
    }
    values.update(overrides)
    return Device(hostname=hostname, **values)


def store_device(lifecycle: DeviceLifecycle, hostname: str = "PC01", **overrides: Any) -> Device:
    return lifecycle.create(make_device(hostname, **overrides))


def stored_ids_for_hostname(
    unit_of_work_factory: Callable[[], SqlAlchemyInventoryUnitOfWork], hostname: str
) -> list[int | None]:
    with unit_of_work_factory() as uow:
        return [device.id for device in uow.repositories.devices.find_by_hostname(hostname)]
