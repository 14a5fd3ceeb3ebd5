"""Device record: the inventory's single aggregate."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Final

from .enums import DeviceStatus, DeviceType

NIC_SLOT_COUNT: Final[int] = 4

BOOKKEEPING_FIELDS: Final[tuple[str, ...]] = (
    "created_at",
    "updated_at",
    "last_discovered",
    "discovery_method",
)


@dataclass(frozen=True, slots=True)
class NetworkInterface:
    slot: int
    name: str | None = None
    ip: str | None = None
    mac: str | None = None
    subnet: str | None = None


@dataclass(eq=False, kw_only=True)
class Device:
    """One inventoried asset.

    ``id`` stays ``None`` until the store assigns one. ``hostname`` is the primary human
    identity key and must be non-empty before persistence; serial number and asset tag are
    optional high-trust identity signals.
    """

    id: int | None = None
    hostname: str = ""
    serial_number: str | None = None
    asset_tag: str | None = None
    device_type: DeviceType = DeviceType.OTHER
    status: DeviceStatus = DeviceStatus.ACTIVE
    equipment_group: str | None = None

    domain_name: str | None = None
    workgroup: str | None = None
    is_domain_joined: bool | None = None

    manufacturer: str | None = None
    model: str | None = None
    cpu_info: str | None = None
    total_ram_gb: float = 0.0
    ram_type: str | None = None
    ram_speed: str | None = None
    ram_manufacturer: str | None = None
    bios_version: str | None = None
    storage_info: str | None = None

    os_name: str | None = None
    os_version: str | None = None
    os_architecture: str | None = None
    os_install_date: datetime | None = None

    drive1_name: str | None = None
    drive1_capacity: str | None = None
    drive1_type: str | None = None
    drive1_model: str | None = None
    drive2_name: str | None = None
    drive2_capacity: str | None = None
    drive2_type: str | None = None
    drive2_model: str | None = None
    drive3_name: str | None = None
    drive3_capacity: str | None = None
    drive3_type: str | None = None
    drive3_model: str | None = None
    drive4_name: str | None = None
    drive4_capacity: str | None = None
    drive4_type: str | None = None
    drive4_model: str | None = None

    primary_nic_name: str | None = None
    primary_ip: str | None = None
    primary_mac: str | None = None
    primary_subnet: str | None = None
    primary_dns: str | None = None
    secondary_dns: str | None = None
    nic2_name: str | None = None
    nic2_ip: str | None = None
    nic2_mac: str | None = None
    nic2_subnet: str | None = None
    nic3_name: str | None = None
    nic3_ip: str | None = None
    nic3_mac: str | None = None
    nic3_subnet: str | None = None
    nic4_name: str | None = None
    nic4_ip: str | None = None
    nic4_mac: str | None = None
    nic4_subnet: str | None = None

    web_interface_url: str | None = None

    area: str | None = None
    zone: str | None = None
    line: str | None = None
    pitch: str | None = None
    floor: str | None = None
    pillar: str | None = None

    additional_notes: str | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_discovered: datetime | None = None
    discovery_method: str | None = None

    @property
    def network_interfaces(self) -> tuple[NetworkInterface, ...]:
        return tuple(
            NetworkInterface(
                slot=slot,
                name=getattr(self, nic_attribute(slot, "name")),
                ip=getattr(self, nic_attribute(slot, "ip")),
                mac=getattr(self, nic_attribute(slot, "mac")),
                subnet=getattr(self, nic_attribute(slot, "subnet")),
            )
            for slot in range(1, NIC_SLOT_COUNT + 1)
        )

    @property
    def mac_addresses(self) -> tuple[str, ...]:
        return tuple(nic.mac for nic in self.network_interfaces if nic.mac and nic.mac.strip())

    @property
    def ip_addresses(self) -> tuple[str, ...]:
        return tuple(nic.ip.strip() for nic in self.network_interfaces if nic.ip and nic.ip.strip())

    def describe(self) -> str:
        """Short human description used in audit entries."""

        return f"{self.hostname} ({self.manufacturer or 'Unknown'} {self.model or 'Unknown'})"


def nic_attribute(slot: int, part: str) -> str:
    """Attribute name for one part (name/ip/mac/subnet) of a NIC slot."""

    if slot == 1:
        return "primary_nic_name" if part == "name" else f"primary_{part}"
    return f"nic{slot}_{part}"


MAC_FIELDS: Final[tuple[str, ...]] = tuple(
    nic_attribute(slot, "mac") for slot in range(1, NIC_SLOT_COUNT + 1)
)
IP_FIELDS: Final[tuple[str, ...]] = tuple(
    nic_attribute(slot, "ip") for slot in range(1, NIC_SLOT_COUNT + 1)
)
DEVICE_FIELDS: Final[tuple[str, ...]] = tuple(f.name for f in fields(Device))
CONTENT_FIELDS: Final[tuple[str, ...]] = tuple(
    name for name in DEVICE_FIELDS if name != "id" and name not in BOOKKEEPING_FIELDS
)
DATETIME_FIELDS: Final[frozenset[str]] = frozenset(
    {"os_install_date", "created_at", "updated_at", "last_discovered"}
)


def has_value(value: object) -> bool:
    """Return whether a field value counts as supplied (non-blank, positive, not None)."""

    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, bool):
        return True
    if isinstance(value, int | float):
        return value > 0
    return True


def copy_device(device: Device, *, keep_id: bool = True) -> Device:
    """Return a detached copy carrying the same field values."""

    values = {name: getattr(device, name) for name in DEVICE_FIELDS}
    if not keep_id:
        values["id"] = None
    return Device(**values)


def device_snapshot(device: Device) -> dict[str, Any]:
    """JSON-safe mapping of every field, used for archive copies."""

    snapshot: dict[str, Any] = {}
    for name in DEVICE_FIELDS:
        value = getattr(device, name)
        if isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        snapshot[name] = value
    return snapshot


def device_from_snapshot(snapshot: dict[str, Any]) -> Device:
    """Rebuild a transient device from ``device_snapshot`` output.

    Unknown keys are ignored so archives written by older schemas still restore.
    """

    values: dict[str, Any] = {}
    for name in DEVICE_FIELDS:
        if name not in snapshot:
            continue
        value = snapshot[name]
        if value is not None and name in DATETIME_FIELDS:
            value = datetime.fromisoformat(value)
        elif name == "device_type" and value is not None:
            value = DeviceType(value)
        elif name == "status" and value is not None:
            value = DeviceStatus(value)
        values[name] = value
    return Device(**values)
