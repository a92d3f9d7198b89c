"""Core media filtering engine.

This module is host-agnostic. It only relies on ports for the blocklist and
for redraw requests, enabling any message renderer to plug in without changes
here. Every public method is a fail-open boundary: an internal fault is logged
and resolved to showing the content.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence

from core.blocklist import merge_urls, should_block_url
from core.config import FilterConfig
from core.gif_classifier import (
    GIFV_EMBED_TYPE,
    is_gif_attachment,
    is_gif_like_embed,
    is_gif_url,
)
from core.models import (
    Affordance,
    AffordanceAction,
    Attachment,
    Embed,
    FilterResult,
    MessageRecord,
)
from core.overrides import OverrideTracker
from core.ports import PatternStorePort, RedrawPort
from core.url_normalizer import equals_any_url

LOGGER = logging.getLogger(__name__)

BLOCKED_NOTE = "GIF Blocked"


def _is_listed(url: Optional[str], patterns: Sequence[str]) -> bool:
    return bool(url) and equals_any_url(url, patterns)


class MediaFilterEngine:
    """Orchestrates GIF classification, blocklist matching and overrides."""

    def __init__(
        self,
        pattern_store: PatternStorePort,
        tracker: OverrideTracker,
        redrawer: RedrawPort,
        filter_config: Optional[FilterConfig] = None,
    ) -> None:
        self._pattern_store = pattern_store
        self._tracker = tracker
        self._redrawer = redrawer
        self._config = filter_config or FilterConfig()

    @property
    def tracker(self) -> OverrideTracker:
        return self._tracker

    @property
    def config(self) -> FilterConfig:
        return self._config

    def _patterns(self) -> List[str]:
        # Read on every call so blocklist edits apply to the next render.
        return list(self._pattern_store.get_patterns() or [])

    def classify_embed(self, embed: Embed, message: MessageRecord) -> bool:
        """Return True if the embed should be suppressed."""

        message_id = getattr(message, "id", None)
        try:
            if self._tracker.is_temporarily_unblocked(message_id):
                return False
            if not is_gif_like_embed(embed):
                return False

            url = embed.resolved_url
            patterns = self._patterns()
            if embed.type == GIFV_EMBED_TYPE:
                # gifv embeds without a resolvable URL are never blocked.
                should_block = _is_listed(url, patterns)
            else:
                should_block = should_block_url(url, patterns)

            if should_block:
                self._tracker.mark_blocked(message_id)
            return should_block
        except Exception:
            LOGGER.exception("Embed classification failed for message %s", message_id)
            return False

    def filter_attachments(self, attachments: Any, message_id: Optional[str] = None) -> Any:
        """Return the attachments that should still be rendered.

        Each attachment's owner is its own ``message_id``, falling back to the
        ``message_id`` argument. Anything that is not a list or tuple is handed
        back untouched, and so is the input when filtering fails.
        """

        if not isinstance(attachments, (list, tuple)):
            return attachments
        try:
            patterns = self._patterns()
            kept: List[Attachment] = []
            for attachment in attachments:
                owner = attachment.message_id or message_id
                if self._tracker.is_temporarily_unblocked(owner):
                    kept.append(attachment)
                    continue
                if not is_gif_attachment(attachment):
                    kept.append(attachment)
                    continue
                if should_block_url(attachment.resolved_url, patterns):
                    self._tracker.mark_blocked(owner)
                    continue
                kept.append(attachment)
            return kept
        except Exception:
            LOGGER.exception("Attachment filtering failed for message %s", message_id)
            return attachments

    def filter_message(self, message: MessageRecord) -> FilterResult:
        """Filter both attachments and embeds of one message."""

        attachments = self.filter_attachments(list(message.attachments), message_id=message.id)
        embeds = [embed for embed in message.embeds if not self.classify_embed(embed, message)]
        return FilterResult(
            attachments=tuple(attachments),
            embeds=tuple(embeds),
            blocked=self._tracker.is_blocked(message.id),
        )

    def collect_gif_urls(self, message: MessageRecord) -> List[str]:
        """Return every GIF URL in the message, first-seen order, no repeats.

        The attachment and embed scans are isolated: a failure in one keeps
        whatever the other found.
        """

        found: dict[str, None] = {}

        try:
            for attachment in message.attachments:
                url = attachment.resolved_url
                if url and is_gif_attachment(attachment):
                    found.setdefault(url)
        except Exception:
            LOGGER.exception("Attachment scan failed for message %s", getattr(message, "id", None))

        try:
            for embed in message.embeds:
                if embed.type == GIFV_EMBED_TYPE:
                    if embed.url:
                        found.setdefault(embed.url)
                    continue
                url = embed.resolved_url
                if url and is_gif_url(url):
                    found.setdefault(url)
        except Exception:
            LOGGER.exception("Embed scan failed for message %s", getattr(message, "id", None))

        return list(found)

    def compute_affordance(self, message: MessageRecord) -> Optional[Affordance]:
        """Decide which popover action to offer for a message, if any."""

        try:
            urls = self.collect_gif_urls(message)
            if not urls:
                return None

            patterns = self._patterns()
            is_blocked_by_list = any(equals_any_url(url, patterns) for url in urls)
            if not is_blocked_by_list:
                return Affordance(AffordanceAction.BLOCK, tuple(urls))
            if self._tracker.is_temporarily_unblocked(message.id):
                return Affordance(AffordanceAction.HIDE_AGAIN, tuple(urls))
            return Affordance(AffordanceAction.REVEAL, tuple(urls))
        except Exception:
            LOGGER.exception("Affordance lookup failed for message %s", getattr(message, "id", None))
            return None

    def apply_user_action(self, message: MessageRecord, affordance: Affordance) -> None:
        """Run the action a popover button was created with."""

        if affordance.action is AffordanceAction.REVEAL:
            self.reveal(message)
        elif affordance.action is AffordanceAction.HIDE_AGAIN:
            self.hide_again(message)
        else:
            self.block_urls(message, affordance.urls)

    def reveal(self, message: MessageRecord) -> None:
        self._tracker.set_temporarily_unblocked(message.id, True)
        self._request_redraw(message)

    def hide_again(self, message: MessageRecord) -> None:
        self._tracker.set_temporarily_unblocked(message.id, False)
        self._request_redraw(message)

    def block_urls(self, message: MessageRecord, urls: Iterable[str]) -> int:
        """Add ``urls`` to the stored blocklist and redraw the message.

        Returns the number of patterns added; zero when saving failed.
        """

        try:
            current = self._patterns()
            merged = merge_urls(current, urls)
            added = len(merged) - len(current)
            if added:
                self._pattern_store.set_patterns(merged)
                LOGGER.info("Blocked %s GIF URL(s) from message %s", added, message.id)
        except Exception:
            LOGGER.exception("Failed to update blocklist for message %s", message.id)
            return 0
        self._request_redraw(message)
        return added

    def accessory_note(self, message: MessageRecord) -> Optional[str]:
        """Return the placeholder shown under a message with blocked media."""

        if not self._tracker.is_blocked(getattr(message, "id", None)):
            return None
        if not self._config.shows_note:
            return None
        return BLOCKED_NOTE

    def _request_redraw(self, message: MessageRecord) -> None:
        # Best effort: blocking state never depends on the redraw succeeding.
        try:
            self._redrawer.request_redraw(message.channel_id, message.id)
        except Exception:
            LOGGER.debug("Redraw request failed for message %s", message.id, exc_info=True)
