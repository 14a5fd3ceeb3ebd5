"""Duplicate detection across the device identity signals.

Rules run in strict priority order. A stored device is reported once, tagged with the
first rule that matched it; weaker signals on an already captured device are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Final

from assetledger.domain.model import IP_FIELDS, MAC_FIELDS, ConfidenceTier, MatchRule

from .contracts import DuplicateDetectionResult, DuplicateMatch
from .normalize import normalize_hostname, normalize_identifier, normalize_ip, normalize_mac

if TYPE_CHECKING:
    from assetledger.domain.model import Device
    from assetledger.domain.ports import DeviceRepository

log = logging.getLogger(__name__)

type _Hit = tuple[Device, tuple[str, ...], str]
type _RuleMatcher = Callable[[Device, DeviceRepository], list[_Hit]]


def _match_hostname(candidate: Device, devices: DeviceRepository) -> list[_Hit]:
    hostname = candidate.hostname.strip() if candidate.hostname else ""
    if not hostname:
        return []
    return [
        (device, ("hostname",), f"Hostname match: {device.hostname}")
        for device in devices.find_by_hostname(hostname)
        if normalize_hostname(device.hostname) == normalize_hostname(hostname)
    ]


def _match_serial_number(candidate: Device, devices: DeviceRepository) -> list[_Hit]:
    serial = normalize_identifier(candidate.serial_number)
    if not serial:
        return []
    return [
        (device, ("serial_number",), f"Serial number match: {serial}")
        for device in devices.find_by_serial_number(serial)
    ]


def _match_asset_tag(candidate: Device, devices: DeviceRepository) -> list[_Hit]:
    asset_tag = normalize_identifier(candidate.asset_tag)
    if not asset_tag:
        return []
    return [
        (device, ("asset_tag",), f"Asset tag match: {asset_tag}")
        for device in devices.find_by_asset_tag(asset_tag)
    ]


def _match_mac_address(candidate: Device, devices: DeviceRepository) -> list[_Hit]:
    wanted = {normalize_mac(mac) for mac in candidate.mac_addresses} - {""}
    if not wanted:
        return []
    results: list[_Hit] = []
    for device in devices.find_by_mac_addresses(sorted(wanted)):
        matched = tuple(
            name for name in MAC_FIELDS if normalize_mac(getattr(device, name)) in wanted
        )
        if not matched:
            continue
        shared = normalize_mac(getattr(device, matched[0]))
        results.append((device, matched, f"MAC address match: {shared}"))
    return results


def _match_ip_address(candidate: Device, devices: DeviceRepository) -> list[_Hit]:
    wanted = {normalize_ip(ip) for ip in candidate.ip_addresses} - {""}
    if not wanted:
        return []
    results: list[_Hit] = []
    for device in devices.find_by_ip_addresses(sorted(wanted)):
        matched = tuple(name for name in IP_FIELDS if normalize_ip(getattr(device, name)) in wanted)
        if not matched:
            continue
        shared = normalize_ip(getattr(device, matched[0]))
        results.append((device, matched, f"IP address match: {shared}"))
    return results


DETECTION_RULES: Final[tuple[tuple[MatchRule, ConfidenceTier, _RuleMatcher], ...]] = (
    (MatchRule.HOSTNAME, ConfidenceTier.HIGH, _match_hostname),
    (MatchRule.SERIAL_NUMBER, ConfidenceTier.HIGH, _match_serial_number),
    (MatchRule.ASSET_TAG, ConfidenceTier.HIGH, _match_asset_tag),
    (MatchRule.MAC_ADDRESS, ConfidenceTier.MEDIUM, _match_mac_address),
    (MatchRule.IP_ADDRESS, ConfidenceTier.LOW, _match_ip_address),
)


def detect_duplicates(candidate: Device, *, devices: DeviceRepository) -> DuplicateDetectionResult:
    """Return stored devices that share an identity signal with ``candidate``."""

    captured: set[int | None] = set()
    if candidate.id is not None:
        captured.add(candidate.id)

    matches: list[DuplicateMatch] = []
    for rule, confidence, matcher in DETECTION_RULES:
        found = sorted(matcher(candidate, devices), key=lambda item: item[0].id or 0)
        for device, matched_fields, reason in found:
            if device.id in captured:
                continue
            captured.add(device.id)
            matches.append(
                DuplicateMatch(
                    existing_device=device,
                    matched_fields=matched_fields,
                    confidence=confidence,
                    rule=rule,
                    reason=reason,
                )
            )

    log.debug(
        "Duplicate detection for %r found %d match(es)", candidate.hostname, len(matches)
    )
    return DuplicateDetectionResult(candidate=candidate, matches=tuple(matches))
