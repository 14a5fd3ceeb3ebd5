from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import pytest

from assetledger.domain.model import MergeField
from assetledger.domain.resolution import merge_device, parse_merge_selection
from assetledger.domain.resolution.merge import NETWORK_FIELDS
from tests.helpers.devices import make_device

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def test_category_tokens_expand_to_their_fields() -> None:
    selection = parse_merge_selection(["all_network"])

    assert selection.fields == NETWORK_FIELDS
    assert selection.field_names == (
        "primary_ip",
        "primary_mac",
        "primary_subnet",
        "primary_dns",
        "secondary_dns",
    )


def test_tokens_are_case_insensitive_and_deduplicated() -> None:
    selection = parse_merge_selection(["ALL_Network", "Primary_IP", "model"])

    assert selection.fields.count(MergeField.PRIMARY_IP) == 1
    assert selection.fields[-1] is MergeField.MODEL


def test_unknown_tokens_are_ignored_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        selection = parse_merge_selection(["model", "flux_capacitor", "id"])

    assert selection.field_names == ("model",)
    assert selection.ignored == ("flux_capacitor", "id")
    assert "flux_capacitor" in caplog.text


def test_blank_candidate_values_never_overwrite() -> None:
    existing = make_device("PC01", manufacturer="Dell", model="OptiPlex", cpu_info="i7")
    candidate = make_device("PC01", manufacturer="", model=None, cpu_info="   ")

    outcome = merge_device(existing, candidate, parse_merge_selection(["all_hardware"]), now=NOW)

    assert outcome.device.manufacturer == "Dell"
    assert outcome.device.model == "OptiPlex"
    assert outcome.device.cpu_info == "i7"
    assert outcome.changed_fields == ()


def test_zero_ram_does_not_replace_known_ram() -> None:
    existing = make_device("PC01", total_ram_gb=16.0)
    hardware = parse_merge_selection(["all_hardware"])

    zero = merge_device(existing, make_device("PC01", total_ram_gb=0.0), hardware, now=NOW)
    larger = merge_device(existing, make_device("PC01", total_ram_gb=32.0), hardware, now=NOW)

    assert zero.device.total_ram_gb == 16.0
    assert larger.device.total_ram_gb == 32.0
    assert larger.changed_fields == ("total_ram_gb",)


def test_only_selected_fields_are_applied() -> None:
    existing = make_device("PC01", primary_ip="10.0.0.1", model="OptiPlex")
    candidate = make_device("PC01", primary_ip="10.0.0.2", model="Latitude")

    outcome = merge_device(existing, candidate, parse_merge_selection(["all_network"]), now=NOW)

    assert outcome.device.primary_ip == "10.0.0.2"
    assert outcome.device.model == "OptiPlex"
    assert outcome.changed_fields == ("primary_ip",)


def test_preserve_existing_only_fills_empty_fields() -> None:
    existing = make_device("PC01", os_name="Windows 10", os_version=None)
    candidate = make_device("PC01", os_name="Windows 11", os_version="23H2")

    outcome = merge_device(
        existing, candidate, parse_merge_selection(["all_os"]), now=NOW, preserve_existing=True
    )

    assert outcome.device.os_name == "Windows 10"
    assert outcome.device.os_version == "23H2"


def test_merge_refreshes_bookkeeping_and_leaves_existing_untouched() -> None:
    existing = make_device("PC01", model="OptiPlex", discovery_method="Manual")
    existing.id = 7
    candidate = make_device("PC01", model="Latitude")

    outcome = merge_device(existing, candidate, parse_merge_selection(["model"]), now=NOW)

    assert outcome.device is not existing
    assert outcome.device.id == 7
    assert outcome.device.updated_at == NOW
    assert outcome.device.last_discovered == NOW
    assert outcome.device.discovery_method == "Merge"
    assert existing.model == "OptiPlex"
    assert existing.updated_at is None


def test_storage_and_interface_categories() -> None:
    existing = make_device("SRV-1")
    candidate = make_device(
        "SRV-1", drive2_name="D:", drive2_capacity="1 TB", nic4_mac="00:11:22:33:44:55"
    )

    outcome = merge_device(
        existing, candidate, parse_merge_selection(["all_storage", "all_interfaces"]), now=NOW
    )

    assert outcome.device.drive2_name == "D:"
    assert outcome.device.drive2_capacity == "1 TB"
    assert outcome.device.nic4_mac == "00:11:22:33:44:55"


def test_merge_ignores_older_candidate_discovery_time() -> None:
    existing = make_device("PC01", last_discovered=NOW - timedelta(hours=2))
    candidate = make_device("PC01", last_discovered=NOW - timedelta(days=3))

    outcome = merge_device(existing, candidate, parse_merge_selection(["model"]), now=NOW)

    assert outcome.device.last_discovered == NOW
