"""Exercise the SQLAlchemy repositories against an in-memory database."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from assetledger.domain.errors import NotFoundError
from assetledger.domain.model import ArchivedDevice, AuditAction, AuditEntry, Device, DeviceType
from tests.helpers.devices import make_device

if TYPE_CHECKING:
    from collections.abc import Callable

    from assetledger.adapters.sqlalchemy.unit_of_work import SqlAlchemyInventoryUnitOfWork

    UowFactory = Callable[[], SqlAlchemyInventoryUnitOfWork]

T0 = datetime(2025, 1, 1, tzinfo=UTC)


def _add_devices(factory: UowFactory, *devices: Device) -> list[int | None]:
    ids: list[int | None] = []
    with factory() as uow:
        for device in devices:
            uow.repositories.devices.add(device)
            ids.append(device.id)
        uow.commit()
    return ids


def test_add_assigns_id_and_get_round_trips(sqlite_unit_of_work: UowFactory) -> None:
    (device_id,) = _add_devices(
        sqlite_unit_of_work,
        make_device("PC01", device_type=DeviceType.SERVER, os_install_date=T0),
    )
    assert device_id is not None

    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.devices.get(device_id)

    assert stored is not None
    assert stored.device_type is DeviceType.SERVER
    assert stored.os_install_date == T0
    assert stored.os_install_date.tzinfo is not None


def test_find_by_hostname_ignores_case(sqlite_unit_of_work: UowFactory) -> None:
    ids = _add_devices(sqlite_unit_of_work, make_device("PC01"), make_device("pc01"))

    with sqlite_unit_of_work() as uow:
        found = uow.repositories.devices.find_by_hostname(" Pc01 ")

    assert [device.id for device in found] == ids


def test_find_by_mac_normalizes_stored_values(sqlite_unit_of_work: UowFactory) -> None:
    ids = _add_devices(
        sqlite_unit_of_work,
        make_device("A", primary_mac="aa-bb-cc-dd-ee-ff"),
        make_device("B", nic3_mac="AABB.CCDD.EEFF"),
        make_device("C", primary_mac="11:22:33:44:55:66"),
    )

    with sqlite_unit_of_work() as uow:
        found = uow.repositories.devices.find_by_mac_addresses(["AABBCCDDEEFF"])
        none = uow.repositories.devices.find_by_mac_addresses([""])

    assert [device.id for device in found] == ids[:2]
    assert none == []


def test_find_by_ip_checks_every_slot(sqlite_unit_of_work: UowFactory) -> None:
    ids = _add_devices(
        sqlite_unit_of_work,
        make_device("A", primary_ip="10.0.0.5"),
        make_device("B", nic4_ip="10.0.0.5"),
        make_device("C", primary_ip="10.0.0.6"),
    )

    with sqlite_unit_of_work() as uow:
        found = uow.repositories.devices.find_by_ip_addresses([" 10.0.0.5 "])

    assert [device.id for device in found] == ids[:2]


def test_replace_overwrites_all_fields(sqlite_unit_of_work: UowFactory) -> None:
    (device_id,) = _add_devices(sqlite_unit_of_work, make_device("PC01", serial_number="SN-1"))
    assert device_id is not None

    with sqlite_unit_of_work() as uow:
        uow.repositories.devices.replace(device_id, make_device("PC01-NEW"))
        uow.commit()
    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.devices.get(device_id)

    assert stored is not None
    assert stored.hostname == "PC01-NEW"
    assert stored.serial_number is None


def test_replace_unknown_device_raises(sqlite_unit_of_work: UowFactory) -> None:
    with sqlite_unit_of_work() as uow, pytest.raises(NotFoundError):
        uow.repositories.devices.replace(42, make_device("PC01"))


def test_archive_listing_and_latest(sqlite_unit_of_work: UowFactory) -> None:
    session_id = uuid4()
    with sqlite_unit_of_work() as uow:
        archive = uow.repositories.archive
        older = ArchivedDevice(
            original_device_id=1,
            hostname="PC01",
            snapshot={"hostname": "PC01"},
            deleted_by="tester",
            deletion_reason="first",
            session_id=session_id,
            deleted_at=T0,
        )
        newer = ArchivedDevice(
            original_device_id=1,
            hostname="PC01",
            snapshot={"hostname": "PC01"},
            deleted_by="tester",
            deletion_reason="second",
            session_id=session_id,
            deleted_at=T0 + timedelta(days=1),
            restored_at=T0 + timedelta(days=2),
        )
        archive.add(older)
        archive.add(newer)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        active = uow.repositories.archive.list_archived()
        everything = uow.repositories.archive.list_archived(include_restored=True)
        latest = uow.repositories.archive.latest_for_device(1)

    assert [item.deletion_reason for item in active] == ["first"]
    assert [item.deletion_reason for item in everything] == ["second", "first"]
    assert latest is not None
    assert latest.deletion_reason == "second"
    assert latest.snapshot == {"hostname": "PC01"}


def test_audit_log_queries_and_purge(sqlite_unit_of_work: UowFactory) -> None:
    session_id = uuid4()
    with sqlite_unit_of_work() as uow:
        for offset, action in enumerate((AuditAction.CREATE, AuditAction.DELETE)):
            uow.repositories.audit_log.add(
                AuditEntry(
                    device_id=7,
                    action=action,
                    session_id=session_id,
                    performed_by="tester",
                    reason="test",
                    performed_at=T0 + timedelta(days=offset * 30),
                )
            )
        uow.commit()

    cutoff = T0 + timedelta(days=10)
    with sqlite_unit_of_work() as uow:
        audit_log = uow.repositories.audit_log
        assert [entry.action for entry in audit_log.for_device(7)] == [
            AuditAction.CREATE,
            AuditAction.DELETE,
        ]
        assert len(audit_log.for_session(session_id)) == 2
        assert audit_log.count_older_than(cutoff) == 1
        assert audit_log.purge_older_than(cutoff) == 1
        uow.commit()

    with sqlite_unit_of_work() as uow:
        remaining = uow.repositories.audit_log.for_device(7)

    assert [entry.action for entry in remaining] == [AuditAction.DELETE]
