"""GIF detection for URLs, attachments and embeds (core domain)."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import parse_qs

from core.models import Attachment, Embed
from core.url_normalizer import parse_url

GIF_CONTENT_TYPE = "image/gif"
GIFV_EMBED_TYPE = "gifv"

# Used only when the URL cannot be parsed.
_GIF_SUFFIX_RE = re.compile(r"\.gif(?:\?|$)", re.IGNORECASE)


def is_gif_url(url: Optional[str]) -> bool:
    """Return True if the URL looks like it points at a GIF.

    Detection is based on:
    - a ``.gif`` path extension (any casing), or
    - an ``animated=true`` query parameter, as used by emoji CDNs.
    """

    if not url:
        return False

    parts = parse_url(url)
    if parts is None:
        return bool(_GIF_SUFFIX_RE.search(url))

    if parts.path.lower().endswith(".gif"):
        return True
    animated = parse_qs(parts.query, keep_blank_values=True).get("animated")
    return bool(animated) and animated[0] == "true"


def is_gif_like_embed(embed: Embed) -> bool:
    if embed.type == GIFV_EMBED_TYPE:
        return True
    return is_gif_url(embed.resolved_url)


def is_gif_attachment(attachment: Attachment) -> bool:
    content_type = attachment.content_type
    if content_type and content_type.lower() == GIF_CONTENT_TYPE:
        return True
    return is_gif_url(attachment.resolved_url)
