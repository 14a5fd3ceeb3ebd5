"""Input sanitization contract consumed by the inventory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from assetledger.domain.model import Device, DeviceType


@runtime_checkable
class Sanitizer(Protocol):
    """Validates and normalizes raw device input; raises ``ValidationError``."""

    def sanitize(self, device: Device) -> Device: ...

    def sanitize_device_type(self, value: str | DeviceType | None) -> DeviceType: ...
