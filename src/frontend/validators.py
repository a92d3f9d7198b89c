"""Validation helpers for blocklist editing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.gif_classifier import is_gif_url
from core.url_normalizer import equals_any_url, normalize_url, parse_url


@dataclass
class PatternInfo:
    value: str
    normalized: str | None
    warning: str | None = None
    error: str | None = None


def parse_pattern(raw_value: str) -> PatternInfo:
    """Check a single blocklist entry as typed by the user."""

    value = raw_value.strip()
    if not value:
        return PatternInfo(value, None, error="URL is required")

    normalized = normalize_url(value)
    if parse_url(value) is None:
        return PatternInfo(value, normalized, warning="not an absolute URL; matched literally")
    if not is_gif_url(value):
        return PatternInfo(value, normalized, warning="not a GIF URL; it will never match")
    return PatternInfo(value, normalized)


def duplicate_indexes(patterns: Sequence[str]) -> set[int]:
    """Return indexes of rows that repeat an earlier row after normalization."""

    duplicates: set[int] = set()
    for index, value in enumerate(patterns):
        if value.strip() and equals_any_url(value, patterns[:index]):
            duplicates.add(index)
    return duplicates
