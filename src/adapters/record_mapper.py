"""Host-to-core message mapping adapter.

Host records arrive as loosely shaped dicts. They are validated here once so
the core never has to probe optional fields: anything missing or of the wrong
type becomes ``None`` (or an empty collection), which the classifier treats as
"not GIF-like".
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from core.models import Attachment, Embed, MediaRef, MessageRecord


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _identifier(value: Any) -> Optional[str]:
    """Return a string id; snowflake ids may come through as integers."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    return _text(value)


def _media_ref(raw: Any) -> Optional[MediaRef]:
    if not isinstance(raw, Mapping):
        return None
    return MediaRef(url=_text(raw.get("url")))


def attachment_from_dict(raw: Any) -> Attachment:
    """Build an Attachment, keeping the original record for hand-back."""

    if not isinstance(raw, Mapping):
        return Attachment(raw=raw)
    return Attachment(
        url=_text(raw.get("url")),
        proxy_url=_text(raw.get("proxy_url")),
        content_type=_text(raw.get("content_type")),
        message_id=_identifier(raw.get("message_id")),
        raw=raw,
    )


def embed_from_dict(raw: Any) -> Embed:
    """Build an Embed, keeping the original record for hand-back."""

    if not isinstance(raw, Mapping):
        return Embed(raw=raw)
    return Embed(
        type=_text(raw.get("type")),
        url=_text(raw.get("url")),
        image=_media_ref(raw.get("image")),
        thumbnail=_media_ref(raw.get("thumbnail")),
        raw=raw,
    )


def message_id_from_dict(raw: Any) -> Optional[str]:
    if not isinstance(raw, Mapping):
        return None
    return _identifier(raw.get("id"))


def message_from_dict(raw: Any) -> MessageRecord:
    """Build a MessageRecord from a host message dict."""

    if not isinstance(raw, Mapping):
        return MessageRecord(id=None)

    return MessageRecord(
        id=_identifier(raw.get("id")),
        channel_id=_identifier(raw.get("channel_id")),
        attachments=tuple(attachment_from_dict(item) for item in _items(raw.get("attachments"))),
        embeds=tuple(embed_from_dict(item) for item in _items(raw.get("embeds"))),
    )


def _items(value: Any) -> list:
    # Absent or wrong-typed collections are treated as empty.
    if isinstance(value, (list, tuple)):
        return list(value)
    return []
