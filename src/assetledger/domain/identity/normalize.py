"""Normalization of identity signals before comparison."""

from __future__ import annotations

import re
from typing import Final

_MAC_SEPARATORS: Final[re.Pattern[str]] = re.compile(r"[\s:\-.]")


def normalize_mac(value: str | None) -> str:
    """Strip separators and upper-case a MAC address (``aa:bb-cc`` -> ``AABBCC``)."""

    if not value:
        return ""
    return _MAC_SEPARATORS.sub("", value).upper()


def normalize_hostname(value: str | None) -> str:
    return (value or "").strip().lower()


def normalize_identifier(value: str | None) -> str:
    """Serial numbers and asset tags compare exactly, only outer whitespace is ignored."""

    return (value or "").strip()


def normalize_ip(value: str | None) -> str:
    return (value or "").strip()
