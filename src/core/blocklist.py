"""Blocklist matching and maintenance (core domain)."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from core.gif_classifier import is_gif_url
from core.url_normalizer import equals_any_url

LOGGER = logging.getLogger(__name__)


def should_block_url(url: Optional[str], patterns: Sequence[str]) -> bool:
    """Return True if a GIF-like ``url`` is on the blocklist.

    Non-GIF URLs are never blocked. Matching failures fail open so a
    malfunction never hides content the user did not ask to hide.
    """

    if not url or not is_gif_url(url):
        return False
    try:
        return equals_any_url(url, patterns)
    except Exception:
        LOGGER.exception("Blocklist match failed for %s", url)
        return False


def merge_urls(existing: Sequence[str], new_urls: Iterable[str]) -> List[str]:
    """Append new URLs that are not already present under normalization.

    Existing order is preserved and new entries keep the order they were
    given in, so merging the same URLs twice is a no-op.
    """

    merged = list(existing)
    for url in new_urls:
        if not url or not url.strip():
            continue
        if equals_any_url(url, merged):
            continue
        merged.append(url)
    return merged
