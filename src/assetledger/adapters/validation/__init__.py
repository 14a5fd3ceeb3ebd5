"""Input validation adapter for submitted devices."""

from __future__ import annotations

from .sanitizer import DefaultSanitizer, translate_validation_error
from .schema import DeviceInput

__all__ = ["DefaultSanitizer", "DeviceInput", "translate_validation_error"]
