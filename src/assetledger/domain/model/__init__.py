"""Domain model for the device inventory."""

from __future__ import annotations

from .archive import ArchivedDevice
from .audit import AuditEntry
from .device import (
    BOOKKEEPING_FIELDS,
    CONTENT_FIELDS,
    DEVICE_FIELDS,
    IP_FIELDS,
    MAC_FIELDS,
    Device,
    NetworkInterface,
    copy_device,
    device_from_snapshot,
    device_snapshot,
    has_value,
    nic_attribute,
)
from .enums import (
    ActionTaken,
    AuditAction,
    ConfidenceTier,
    DeviceStatus,
    DeviceType,
    ErrorCode,
    MatchRule,
    MergeCategory,
    MergeField,
    ResolutionAction,
)

__all__ = [
    "BOOKKEEPING_FIELDS",
    "CONTENT_FIELDS",
    "DEVICE_FIELDS",
    "IP_FIELDS",
    "MAC_FIELDS",
    "ActionTaken",
    "ArchivedDevice",
    "AuditAction",
    "AuditEntry",
    "ConfidenceTier",
    "Device",
    "DeviceStatus",
    "DeviceType",
    "ErrorCode",
    "MatchRule",
    "MergeCategory",
    "MergeField",
    "NetworkInterface",
    "ResolutionAction",
    "copy_device",
    "device_from_snapshot",
    "device_snapshot",
    "has_value",
    "nic_attribute",
]
