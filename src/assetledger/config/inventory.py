"""Inventory behaviour defaults read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .errors import ConfigurationError

DEFAULT_AUDIT_RETENTION_DAYS: Final[int] = 365
DEFAULT_DEVICE_TYPE: Final[str] = "Other"
DEFAULT_DISCOVERY_METHOD: Final[str] = "Manual"


@dataclass(frozen=True, slots=True)
class InventoryConfig:
    audit_retention_days: int = DEFAULT_AUDIT_RETENTION_DAYS
    default_device_type: str = DEFAULT_DEVICE_TYPE
    default_discovery_method: str = DEFAULT_DISCOVERY_METHOD


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {value}")
    return value


def get_inventory_config() -> InventoryConfig:
    return InventoryConfig(
        audit_retention_days=_positive_int(
            "ASSETLEDGER_AUDIT_RETENTION_DAYS", DEFAULT_AUDIT_RETENTION_DAYS
        ),
        default_device_type=(
            os.getenv("ASSETLEDGER_DEFAULT_DEVICE_TYPE") or DEFAULT_DEVICE_TYPE
        ).strip(),
        default_discovery_method=(
            os.getenv("ASSETLEDGER_DISCOVERY_METHOD") or DEFAULT_DISCOVERY_METHOD
        ).strip(),
    )
