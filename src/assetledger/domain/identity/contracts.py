"""Duplicate detection result types."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetledger.domain.model import ConfidenceTier, Device, MatchRule


@dataclass(frozen=True, slots=True, kw_only=True)
class DuplicateMatch:
    """One correlation between a candidate and an existing device."""

    existing_device: Device
    matched_fields: tuple[str, ...]
    confidence: ConfidenceTier
    rule: MatchRule
    reason: str


@dataclass(frozen=True, slots=True, kw_only=True)
class DuplicateDetectionResult:
    candidate: Device
    matches: tuple[DuplicateMatch, ...] = field(default_factory=tuple)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.matches)

    @property
    def token(self) -> str:
        """Opaque fingerprint of the matched records, compared again at write time."""

        return detection_token(self.matches)


def detection_token(matches: tuple[DuplicateMatch, ...]) -> str:
    digest = hashlib.sha256()
    for match in matches:
        device = match.existing_device
        updated_at = device.updated_at.isoformat() if device.updated_at else ""
        digest.update(f"{device.id}|{match.rule}|{updated_at};".encode())
    return digest.hexdigest()
