"""Duplicate detection for candidate devices."""

from __future__ import annotations

from .contracts import DuplicateDetectionResult, DuplicateMatch, detection_token
from .detect import DETECTION_RULES, detect_duplicates
from .normalize import normalize_hostname, normalize_identifier, normalize_ip, normalize_mac

__all__ = [
    "DETECTION_RULES",
    "DuplicateDetectionResult",
    "DuplicateMatch",
    "detect_duplicates",
    "detection_token",
    "normalize_hostname",
    "normalize_identifier",
    "normalize_ip",
    "normalize_mac",
]
