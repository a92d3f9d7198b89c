"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any host-specific message types. Host records are validated once
by the record mapper; everything past that boundary can rely on these shapes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class MediaRef:
    """Nested media reference of an embed (image or thumbnail)."""

    url: Optional[str] = None


@dataclass(frozen=True)
class Attachment:
    """File attached to a message.

    ``raw`` keeps the host's original record so filtered results can be handed
    back to the host untouched.
    """

    url: Optional[str] = None
    proxy_url: Optional[str] = None
    content_type: Optional[str] = None
    message_id: Optional[str] = None
    raw: Any = field(default=None, compare=False, repr=False)

    @property
    def resolved_url(self) -> Optional[str]:
        return self.url or self.proxy_url


@dataclass(frozen=True)
class Embed:
    """Rich embed rendered under a message."""

    type: Optional[str] = None
    url: Optional[str] = None
    image: Optional[MediaRef] = None
    thumbnail: Optional[MediaRef] = None
    raw: Any = field(default=None, compare=False, repr=False)

    @property
    def resolved_url(self) -> Optional[str]:
        """First present of ``url``, ``image.url`` and ``thumbnail.url``."""

        if self.url:
            return self.url
        if self.image is not None and self.image.url:
            return self.image.url
        if self.thumbnail is not None and self.thumbnail.url:
            return self.thumbnail.url
        return None


@dataclass(frozen=True)
class MessageRecord:
    """Minimal message shape consumed by the filter engine."""

    id: Optional[str]
    channel_id: Optional[str] = None
    attachments: Tuple[Attachment, ...] = ()
    embeds: Tuple[Embed, ...] = ()


class AffordanceAction(str, Enum):
    """Popover action offered for a message with GIF content."""

    REVEAL = "reveal"
    HIDE_AGAIN = "hide_again"
    BLOCK = "block"


AFFORDANCE_LABELS = {
    AffordanceAction.REVEAL: "Show GIF",
    AffordanceAction.HIDE_AGAIN: "Hide GIF",
    AffordanceAction.BLOCK: "Hide GIFs",
}


@dataclass(frozen=True)
class Affordance:
    """What the message popover button should offer and act upon."""

    action: AffordanceAction
    urls: Tuple[str, ...]

    @property
    def label(self) -> str:
        return AFFORDANCE_LABELS[self.action]


@dataclass(frozen=True)
class FilterResult:
    """Outcome of filtering one message's media."""

    attachments: Tuple[Attachment, ...]
    embeds: Tuple[Embed, ...]
    blocked: bool
