"""Field-level merge of a candidate into an existing device.

A selected field is taken from the candidate only when the candidate actually carries a
value, so a blank or zero scan result never erases stored data.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from assetledger.domain.model import MergeCategory, MergeField, copy_device, has_value

from .contracts import MergeOutcome, MergeSelection

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from assetledger.domain.model import Device

log = logging.getLogger(__name__)

MERGE_DISCOVERY_METHOD: Final[str] = "Merge"

HARDWARE_FIELDS: Final[tuple[MergeField, ...]] = (
    MergeField.MANUFACTURER,
    MergeField.MODEL,
    MergeField.CPU_INFO,
    MergeField.TOTAL_RAM_GB,
    MergeField.RAM_TYPE,
    MergeField.RAM_SPEED,
    MergeField.RAM_MANUFACTURER,
    MergeField.BIOS_VERSION,
    MergeField.STORAGE_INFO,
)

NETWORK_FIELDS: Final[tuple[MergeField, ...]] = (
    MergeField.PRIMARY_IP,
    MergeField.PRIMARY_MAC,
    MergeField.PRIMARY_SUBNET,
    MergeField.PRIMARY_DNS,
    MergeField.SECONDARY_DNS,
)

OS_FIELDS: Final[tuple[MergeField, ...]] = (
    MergeField.OS_NAME,
    MergeField.OS_VERSION,
    MergeField.OS_ARCHITECTURE,
    MergeField.OS_INSTALL_DATE,
)

STORAGE_FIELDS: Final[tuple[MergeField, ...]] = tuple(
    MergeField(f"drive{slot}_{part}")
    for slot in range(1, 5)
    for part in ("name", "capacity", "type", "model")
)

INTERFACE_FIELDS: Final[tuple[MergeField, ...]] = tuple(
    MergeField(f"nic{slot}_{part}")
    for slot in range(2, 5)
    for part in ("name", "ip", "mac", "subnet")
)

CATEGORY_FIELDS: Final[dict[MergeCategory, tuple[MergeField, ...]]] = {
    MergeCategory.ALL_HARDWARE: HARDWARE_FIELDS,
    MergeCategory.ALL_NETWORK: NETWORK_FIELDS,
    MergeCategory.ALL_OS: OS_FIELDS,
    MergeCategory.ALL_STORAGE: STORAGE_FIELDS,
    MergeCategory.ALL_INTERFACES: INTERFACE_FIELDS,
}


def parse_merge_selection(tokens: Iterable[str | MergeField | MergeCategory]) -> MergeSelection:
    """Expand category tokens and drop anything that is not a mergeable field."""

    selected: dict[MergeField, None] = {}
    ignored: list[str] = []
    for token in tokens:
        key = str(token).strip().lower()
        if key in MergeCategory:
            selected.update(dict.fromkeys(CATEGORY_FIELDS[MergeCategory(key)]))
        elif key in MergeField:
            selected[MergeField(key)] = None
        else:
            ignored.append(str(token))
    if ignored:
        log.warning("Ignoring unknown merge field token(s): %s", ", ".join(ignored))
    return MergeSelection(fields=tuple(selected), ignored=tuple(ignored))


def merge_device(
    existing: Device,
    candidate: Device,
    selection: MergeSelection,
    *,
    now: datetime,
    preserve_existing: bool = False,
) -> MergeOutcome:
    """Return a clone of ``existing`` with the selected candidate values applied.

    With ``preserve_existing`` only fields that are empty on ``existing`` are filled.
    Bookkeeping is refreshed whatever the selection.
    """

    merged = copy_device(existing)
    changed: list[str] = []
    for merge_field in selection.fields:
        name = str(merge_field)
        new_value = getattr(candidate, name)
        if not has_value(new_value):
            continue
        current = getattr(merged, name)
        if preserve_existing and has_value(current):
            continue
        if current != new_value:
            setattr(merged, name, new_value)
            changed.append(name)

    merged.last_discovered = now
    merged.updated_at = now
    merged.discovery_method = candidate.discovery_method or MERGE_DISCOVERY_METHOD
    return MergeOutcome(device=merged, changed_fields=tuple(changed))
