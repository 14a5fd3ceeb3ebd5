from __future__ import annotations

from typing import TYPE_CHECKING

from assetledger.domain.identity import detect_duplicates, normalize_mac
from assetledger.domain.model import ConfidenceTier, MatchRule
from tests.helpers.devices import make_device, store_device

if TYPE_CHECKING:
    from collections.abc import Callable

    from assetledger.adapters.sqlalchemy.unit_of_work import SqlAlchemyInventoryUnitOfWork
    from assetledger.domain.inventory import DeviceInventory
    from assetledger.domain.lifecycle import DeviceLifecycle
    from tests.helpers.clock import FrozenClock

    UowFactory = Callable[[], SqlAlchemyInventoryUnitOfWork]


def test_normalize_mac_strips_separators_and_uppercases() -> None:
    assert normalize_mac("aa:bb:cc:dd:ee:ff") == "AABBCCDDEEFF"
    assert normalize_mac("AA-BB-CC-DD-EE-FF") == "AABBCCDDEEFF"
    assert normalize_mac("aabb.ccdd.eeff") == "AABBCCDDEEFF"
    assert normalize_mac(" aa bb cc dd ee ff ") == "AABBCCDDEEFF"
    assert normalize_mac(None) == ""


def test_detect_returns_no_matches_on_empty_store(inventory: DeviceInventory) -> None:
    result = inventory.detect(make_device("PC01", serial_number="SN-1"))

    assert not result.has_duplicates
    assert result.matches == ()


def test_hostname_match_is_case_insensitive(
    inventory: DeviceInventory, lifecycle: DeviceLifecycle
) -> None:
    stored = store_device(lifecycle, "PC01")

    result = inventory.detect(make_device("pc01"))

    assert len(result.matches) == 1
    match = result.matches[0]
    assert match.existing_device.id == stored.id
    assert match.rule is MatchRule.HOSTNAME
    assert match.confidence is ConfidenceTier.HIGH
    assert match.matched_fields == ("hostname",)
    assert match.reason == "Hostname match: PC01"


def test_strongest_rule_wins_for_device_matching_several_signals(
    inventory: DeviceInventory, lifecycle: DeviceLifecycle
) -> None:
    store_device(
        lifecycle,
        "PC01",
        serial_number="SN-1",
        asset_tag="AT-1",
        primary_mac="AA:BB:CC:DD:EE:FF",
        primary_ip="10.0.0.5",
    )

    result = inventory.detect(
        make_device(
            "PC01",
            serial_number="SN-1",
            asset_tag="AT-1",
            primary_mac="AA:BB:CC:DD:EE:FF",
            primary_ip="10.0.0.5",
        )
    )

    assert len(result.matches) == 1
    assert result.matches[0].rule is MatchRule.HOSTNAME


def test_mac_match_ignores_formatting_and_slot(
    inventory: DeviceInventory, lifecycle: DeviceLifecycle
) -> None:
    stored = store_device(lifecycle, "PRN-7", primary_mac="AA:BB:CC:DD:EE:FF")

    result = inventory.detect(make_device("LAPTOP-3", nic2_mac="aa-bb-cc-dd-ee-ff"))

    assert len(result.matches) == 1
    match = result.matches[0]
    assert match.existing_device.id == stored.id
    assert match.rule is MatchRule.MAC_ADDRESS
    assert match.confidence is ConfidenceTier.MEDIUM
    assert match.matched_fields == ("primary_mac",)
    assert match.reason == "MAC address match: AABBCCDDEEFF"


def test_ip_match_has_low_confidence(
    inventory: DeviceInventory, lifecycle: DeviceLifecycle
) -> None:
    store_device(lifecycle, "CAM-1", primary_ip="10.0.0.5")

    result = inventory.detect(make_device("CAM-2", nic3_ip=" 10.0.0.5 "))

    assert [match.rule for match in result.matches] == [MatchRule.IP_ADDRESS]
    assert result.matches[0].confidence is ConfidenceTier.LOW
    assert result.matches[0].reason == "IP address match: 10.0.0.5"


def test_matches_are_grouped_by_rule_priority_then_id(
    inventory: DeviceInventory, lifecycle: DeviceLifecycle
) -> None:
    by_ip = store_device(lifecycle, "HOST-A", primary_ip="10.0.0.9")
    by_serial_1 = store_device(lifecycle, "HOST-B", serial_number="SN-9")
    by_serial_2 = store_device(lifecycle, "HOST-C", serial_number="SN-9")
    by_hostname = store_device(lifecycle, "HOST-D")

    result = inventory.detect(make_device("HOST-D", serial_number="SN-9", primary_ip="10.0.0.9"))

    assert [match.existing_device.id for match in result.matches] == [
        by_hostname.id,
        by_serial_1.id,
        by_serial_2.id,
        by_ip.id,
    ]
    assert [match.rule for match in result.matches] == [
        MatchRule.HOSTNAME,
        MatchRule.SERIAL_NUMBER,
        MatchRule.SERIAL_NUMBER,
        MatchRule.IP_ADDRESS,
    ]


def test_blank_identity_fields_never_match(
    inventory: DeviceInventory, lifecycle: DeviceLifecycle
) -> None:
    store_device(lifecycle, "HOST-A", serial_number=None, asset_tag=None)

    result = inventory.detect(make_device("HOST-B", serial_number="   ", asset_tag=""))

    assert not result.has_duplicates


def test_candidate_is_never_its_own_duplicate(
    sqlite_unit_of_work: UowFactory, lifecycle: DeviceLifecycle
) -> None:
    stored = store_device(lifecycle, "PC01", serial_number="SN-1")

    with sqlite_unit_of_work() as uow:
        result = detect_duplicates(stored, devices=uow.repositories.devices)

    assert not result.has_duplicates


def test_detection_is_repeatable_and_token_stable(
    inventory: DeviceInventory, lifecycle: DeviceLifecycle
) -> None:
    store_device(lifecycle, "PC01")
    store_device(lifecycle, "PC02", serial_number="SN-1")
    candidate = make_device("PC01", serial_number="SN-1")

    first = inventory.detect(candidate)
    second = inventory.detect(candidate)

    assert [m.existing_device.id for m in first.matches] == [
        m.existing_device.id for m in second.matches
    ]
    assert first.token == second.token


def test_token_changes_when_matched_device_is_updated(
    inventory: DeviceInventory, lifecycle: DeviceLifecycle, clock: FrozenClock
) -> None:
    stored = store_device(lifecycle, "PC01")
    before = inventory.detect(make_device("PC01"))

    clock.advance(minutes=5)
    assert stored.id is not None
    lifecycle.replace(stored.id, make_device("PC01", model="OptiPlex 9020"))
    after = inventory.detect(make_device("PC01"))

    assert before.token != after.token