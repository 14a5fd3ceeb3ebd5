from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from assetledger.adapters.validation import (
    DefaultSanitizer,
    DeviceInput,
    translate_validation_error,
)
from assetledger.adapters.validation.schema import MAX_NOTES_LENGTH
from assetledger.domain.errors import ValidationError
from assetledger.domain.model import DeviceStatus, DeviceType
from assetledger.domain.sanitize import Sanitizer
from tests.helpers.devices import make_device


@pytest.fixture
def sanitizer() -> DefaultSanitizer:
    return DefaultSanitizer()


def test_default_sanitizer_satisfies_protocol(sanitizer: DefaultSanitizer) -> None:
    assert isinstance(sanitizer, Sanitizer)


def test_device_input_strips_control_characters_and_blanks() -> None:
    parsed = DeviceInput.model_validate(
        {"hostname": "  PC\x0001\x07 ", "model": "   ", "manufacturer": None}
    )

    assert parsed.hostname == "PC01"
    assert parsed.model is None
    assert parsed.manufacturer is None


def test_device_input_reads_device_attributes() -> None:
    parsed = DeviceInput.model_validate(make_device("PC01", primary_ip=" 10.0.0.5 "))

    assert parsed.hostname == "PC01"
    assert parsed.model_dump()["primary_ip"] == "10.0.0.5"


def test_sanitize_returns_copy_with_trimmed_values(sanitizer: DefaultSanitizer) -> None:
    device = make_device("  PC01 ", manufacturer="  Dell  ", model="")

    cleaned = sanitizer.sanitize(device)

    assert cleaned is not device
    assert cleaned.hostname == "PC01"
    assert cleaned.manufacturer == "Dell"
    assert cleaned.model is None
    assert device.hostname == "  PC01 "


def test_sanitize_keeps_fields_outside_the_schema(sanitizer: DefaultSanitizer) -> None:
    device = make_device("PC01", is_domain_joined=True)
    device.id = 12

    cleaned = sanitizer.sanitize(device)

    assert cleaned.id == 12
    assert cleaned.is_domain_joined is True


def test_blank_hostname_becomes_empty_string(sanitizer: DefaultSanitizer) -> None:
    assert sanitizer.sanitize(make_device("   ")).hostname == ""


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("hostname", "bad host!"),
        ("primary_ip", "10.0.0.300"),
        ("secondary_dns", "dns.example"),
        ("primary_mac", "ZZ:BB:CC:DD:EE:FF"),
        ("nic2_mac", "AA:BB:CC"),
        ("web_interface_url", "ftp://printer.local"),
        ("asset_tag", "AT-1; DROP"),
        ("total_ram_gb", -1.0),
        ("status", "Exploded"),
    ],
)
def test_malformed_values_are_rejected(
    sanitizer: DefaultSanitizer, field: str, value: object
) -> None:
    if field == "hostname":
        device = make_device(str(value))
    else:
        device = make_device("PC01", **{field: value})

    with pytest.raises(ValidationError) as exc:
        sanitizer.sanitize(device)

    assert exc.value.field == field


def test_mac_error_message_names_the_value(sanitizer: DefaultSanitizer) -> None:
    with pytest.raises(ValidationError) as exc:
        sanitizer.sanitize(make_device("PC01", primary_mac="AA:BB:CC"))

    assert str(exc.value) == "Invalid MAC address format: AA:BB:CC"


def test_well_formed_network_values_pass(sanitizer: DefaultSanitizer) -> None:
    device = make_device(
        "PC01",
        primary_ip="10.0.0.5",
        nic2_ip="fe80::1",
        primary_mac="aa-bb-cc-dd-ee-ff",
        primary_dns="10.0.0.1",
        web_interface_url="https://printer.local/status",
        asset_tag="AT-0042",
    )

    cleaned = sanitizer.sanitize(device)

    assert cleaned.primary_mac == "aa-bb-cc-dd-ee-ff"
    assert cleaned.primary_ip == "10.0.0.5"
    assert cleaned.nic2_ip == "fe80::1"
    assert cleaned.primary_dns == "10.0.0.1"
    assert cleaned.web_interface_url == "https://printer.local/status"


def test_notes_are_truncated(sanitizer: DefaultSanitizer) -> None:
    cleaned = sanitizer.sanitize(make_device("PC01", additional_notes="x" * 5000))

    assert cleaned.additional_notes is not None
    assert len(cleaned.additional_notes) == MAX_NOTES_LENGTH


def test_status_is_matched_case_insensitively(sanitizer: DefaultSanitizer) -> None:
    retired = sanitizer.sanitize(make_device("PC01", status=" retired "))
    unset = sanitizer.sanitize(make_device("PC01", status=None))

    assert retired.status is DeviceStatus.RETIRED
    assert unset.status is DeviceStatus.ACTIVE


def test_device_type_is_whitelisted(sanitizer: DefaultSanitizer) -> None:
    assert sanitizer.sanitize_device_type(" printer ") is DeviceType.PRINTER
    assert sanitizer.sanitize_device_type(DeviceType.SERVER) is DeviceType.SERVER
    with pytest.raises(ValidationError) as unknown:
        sanitizer.sanitize_device_type("Toaster")
    with pytest.raises(ValidationError) as blank:
        sanitizer.sanitize_device_type("  ")

    assert unknown.value.field == "device_type"
    assert str(unknown.value) == "DeviceType not allowed: Toaster"
    assert str(blank.value) == "Device type cannot be empty"


def test_translate_validation_error_uses_first_error() -> None:
    with pytest.raises(PydanticValidationError) as exc:
        DeviceInput.model_validate({"primary_ip": "nope", "nic2_ip": "also-nope"})

    translated = translate_validation_error(exc.value)

    assert translated.field == "primary_ip"
    assert str(translated).startswith("Invalid primary_ip:")
