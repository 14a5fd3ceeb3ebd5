"""Pydantic model describing raw device input before it reaches the inventory."""

from __future__ import annotations

import re
from typing import Annotated, Final

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    IPvAnyAddress,
    StringConstraints,
    field_serializer,
    field_validator,
)

from assetledger.domain.identity import normalize_mac
from assetledger.domain.model import IP_FIELDS, MAC_FIELDS, DeviceStatus, DeviceType

MAX_STRING_LENGTH: Final[int] = 255
MAX_NOTES_LENGTH: Final[int] = 2000
MAX_URL_LENGTH: Final[int] = 500
MAX_HOSTNAME_LENGTH: Final[int] = 63
MAX_LABEL_LENGTH: Final[int] = 100
MAX_CHOICE_LENGTH: Final[int] = 50

HOSTNAME_PATTERN: Final[str] = r"^[a-zA-Z0-9\-_.]+$"
LABEL_PATTERN: Final[str] = r"^[a-zA-Z0-9\s\-_.#/]+$"

_CONTROL_CHARACTERS: Final[re.Pattern[str]] = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_MAC: Final[re.Pattern[str]] = re.compile(r"^[0-9A-F]{12}$")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = _CONTROL_CHARACTERS.sub("", value).strip()
        return stripped or None
    return value


def _clean_text(value: object, max_length: int) -> object:
    cleaned = _blank_to_none(value)
    if isinstance(cleaned, str):
        return cleaned[:max_length]
    return cleaned


def _capped(max_length: int) -> BeforeValidator:
    """Clean like ``_blank_to_none`` and cut the text down to ``max_length``."""

    def clean(value: object) -> object:
        return _clean_text(value, max_length)

    return BeforeValidator(clean)


def _choice(enum_type: type[DeviceType] | type[DeviceStatus], value: object) -> object:
    if not isinstance(value, str):
        return value
    for member in enum_type:
        if member.value.lower() == value.lower():
            return member
    raise ValueError(f"{enum_type.__name__} not allowed: {value}")


def _device_type_choice(value: object) -> object:
    cleaned = _clean_text(value, MAX_CHOICE_LENGTH)
    if cleaned is None:
        raise ValueError("Device type cannot be empty")
    return _choice(DeviceType, cleaned)


def _status_choice(value: object) -> object:
    cleaned = _clean_text(value, MAX_CHOICE_LENGTH)
    if cleaned is None:
        return DeviceStatus.ACTIVE
    return _choice(DeviceStatus, cleaned)


Text = Annotated[str | None, _capped(MAX_STRING_LENGTH)]
Notes = Annotated[str | None, _capped(MAX_NOTES_LENGTH)]
Hostname = Annotated[
    Annotated[str, StringConstraints(pattern=HOSTNAME_PATTERN)] | None,
    _capped(MAX_HOSTNAME_LENGTH),
]
Label = Annotated[
    Annotated[str, StringConstraints(pattern=LABEL_PATTERN)] | None,
    _capped(MAX_LABEL_LENGTH),
]
Address = Annotated[IPvAnyAddress | None, BeforeValidator(_blank_to_none)]
WebUrl = Annotated[AnyHttpUrl | None, _capped(MAX_URL_LENGTH)]
DeviceTypeChoice = Annotated[DeviceType, BeforeValidator(_device_type_choice)]
StatusChoice = Annotated[DeviceStatus, BeforeValidator(_status_choice)]

ADDRESS_FIELDS: Final[tuple[str, ...]] = (*IP_FIELDS, "primary_dns", "secondary_dns")


class DeviceInput(BaseModel):
    """Whitelisted view of a submitted device.

    Text is stripped of control characters, trimmed, cut to its column size and blank
    values become ``None``. Read straight off a ``Device`` via ``from_attributes``.
    """

    model_config = ConfigDict(extra="ignore", from_attributes=True)

    hostname: Hostname = None
    serial_number: Text = None
    asset_tag: Label = None
    device_type: DeviceTypeChoice = DeviceType.OTHER
    status: StatusChoice = DeviceStatus.ACTIVE
    equipment_group: Label = None

    domain_name: Text = None
    workgroup: Text = None

    manufacturer: Text = None
    model: Text = None
    cpu_info: Text = None
    total_ram_gb: float = Field(default=0.0, ge=0)
    ram_type: Text = None
    ram_speed: Text = None
    ram_manufacturer: Text = None
    bios_version: Text = None
    storage_info: Text = None

    os_name: Text = None
    os_version: Text = None
    os_architecture: Text = None

    drive1_name: Text = None
    drive1_capacity: Text = None
    drive1_type: Text = None
    drive1_model: Text = None
    drive2_name: Text = None
    drive2_capacity: Text = None
    drive2_type: Text = None
    drive2_model: Text = None
    drive3_name: Text = None
    drive3_capacity: Text = None
    drive3_type: Text = None
    drive3_model: Text = None
    drive4_name: Text = None
    drive4_capacity: Text = None
    drive4_type: Text = None
    drive4_model: Text = None

    primary_nic_name: Text = None
    primary_ip: Address = None
    primary_mac: Text = None
    primary_subnet: Text = None
    primary_dns: Address = None
    secondary_dns: Address = None
    nic2_name: Text = None
    nic2_ip: Address = None
    nic2_mac: Text = None
    nic2_subnet: Text = None
    nic3_name: Text = None
    nic3_ip: Address = None
    nic3_mac: Text = None
    nic3_subnet: Text = None
    nic4_name: Text = None
    nic4_ip: Address = None
    nic4_mac: Text = None
    nic4_subnet: Text = None

    web_interface_url: WebUrl = None

    area: Label = None
    zone: Label = None
    line: Label = None
    pitch: Label = None
    floor: Label = None
    pillar: Label = None

    additional_notes: Notes = None
    discovery_method: Annotated[str | None, _capped(MAX_CHOICE_LENGTH)] = None

    @field_validator(*MAC_FIELDS)
    @classmethod
    def _check_mac(cls, value: str | None) -> str | None:
        if value is not None and not _MAC.match(normalize_mac(value)):
            raise ValueError(f"Invalid MAC address format: {value}")
        return value

    @field_serializer(*ADDRESS_FIELDS, "web_interface_url")
    def _as_text(self, value: object) -> str | None:
        return None if value is None else str(value)
