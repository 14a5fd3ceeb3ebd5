"""Caller-directed resolution of duplicate candidates."""

from __future__ import annotations

from .contracts import MergeOutcome, MergeSelection, ResolutionDecision, ResolutionResult
from .merge import CATEGORY_FIELDS, merge_device, parse_merge_selection
from .resolve import resolve_duplicate

__all__ = [
    "CATEGORY_FIELDS",
    "MergeOutcome",
    "MergeSelection",
    "ResolutionDecision",
    "ResolutionResult",
    "merge_device",
    "parse_merge_selection",
    "resolve_duplicate",
]
