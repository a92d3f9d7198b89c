from __future__ import annotations

import logging
from typing import Optional, Sequence

from core.config import FilterConfig
from core.engine import BLOCKED_NOTE, MediaFilterEngine
from core.models import AffordanceAction, Attachment, Embed, MediaRef, MessageRecord
from core.overrides import OverrideTracker

BLOCKED_GIF = "https://media.tenor.com/abc/cat.gif"
OTHER_GIF = "https://media.tenor.com/def/dog.gif"


class FakePatternStore:
    def __init__(self, patterns: Optional[list[str]] = None) -> None:
        self.patterns: list[str] = list(patterns or [])
        self.saves = 0

    def get_patterns(self) -> list[str]:
        return list(self.patterns)

    def set_patterns(self, patterns: Sequence[str]) -> None:
        self.patterns = list(patterns)
        self.saves += 1


class BrokenPatternStore(FakePatternStore):
    def get_patterns(self) -> list[str]:
        raise RuntimeError("settings unavailable")


class FakeRedrawer:
    def __init__(self) -> None:
        self.calls: list[tuple[Optional[str], Optional[str]]] = []

    def request_redraw(self, channel_id: Optional[str], message_id: Optional[str]) -> None:
        self.calls.append((channel_id, message_id))


class FailingRedrawer:
    def request_redraw(self, channel_id: Optional[str], message_id: Optional[str]) -> None:
        raise RuntimeError("renderer gone")


def _engine(
    patterns: Optional[list[str]] = None,
    *,
    store: Optional[FakePatternStore] = None,
    redrawer=None,
    mode: str = "note",
) -> MediaFilterEngine:
    return MediaFilterEngine(
        pattern_store=store or FakePatternStore(patterns),
        tracker=OverrideTracker(),
        redrawer=redrawer or FakeRedrawer(),
        filter_config=FilterConfig(replacement_mode=mode),
    )


def _message(
    message_id: str = "m1",
    *,
    attachments: tuple[Attachment, ...] = (),
    embeds: tuple[Embed, ...] = (),
) -> MessageRecord:
    return MessageRecord(id=message_id, channel_id="c1", attachments=attachments, embeds=embeds)


def test_gifv_embed_is_blocked_until_revealed() -> None:
    engine = _engine(["https://t.co/x.gif"])
    embed = Embed(type="gifv", url="https://t.co/x.gif")
    message = _message("m1", embeds=(embed,))

    assert engine.classify_embed(embed, message)
    assert "m1" in engine.tracker.blocked_ids

    engine.tracker.set_temporarily_unblocked("m1", True)
    assert not engine.classify_embed(embed, message)


def test_gifv_embed_without_url_is_never_blocked() -> None:
    engine = _engine([BLOCKED_GIF])
    message = _message()
    assert not engine.classify_embed(Embed(type="gifv"), message)
    assert not engine.tracker.is_blocked("m1")


def test_gifv_embed_matches_without_gif_extension() -> None:
    url = "https://tenor.com/view/cat-dance-123"
    engine = _engine([url])
    assert engine.classify_embed(Embed(type="gifv", url=url), _message())


def test_image_embed_uses_resolved_url() -> None:
    engine = _engine([BLOCKED_GIF])
    embed = Embed(type="image", image=MediaRef(url=BLOCKED_GIF))
    assert engine.classify_embed(embed, _message())


def test_non_gif_embed_is_kept_even_when_listed() -> None:
    engine = _engine(["https://x.com/page"])
    embed = Embed(type="link", url="https://x.com/page")
    assert not engine.classify_embed(embed, _message())
    assert engine.tracker.blocked_ids == frozenset()


def test_classify_embed_fails_open(caplog) -> None:
    engine = _engine(store=BrokenPatternStore())
    with caplog.at_level(logging.ERROR):
        assert not engine.classify_embed(Embed(url=BLOCKED_GIF), _message())
    assert "Embed classification failed" in caplog.text


def test_filter_attachments_removes_listed_gif_and_marks_message() -> None:
    engine = _engine([BLOCKED_GIF])
    attachment = Attachment(url=BLOCKED_GIF, content_type="image/gif", message_id="m1")

    assert engine.filter_attachments([attachment]) == []
    assert engine.tracker.is_blocked("m1")


def test_filter_attachments_keeps_gif_content_type_with_plain_url() -> None:
    url = "https://cdn.x.com/attachments/1/2/file"
    engine = _engine([url])
    attachment = Attachment(url=url, content_type="image/gif", message_id="m1")

    assert engine.filter_attachments([attachment]) == [attachment]
    assert not engine.tracker.is_blocked("m1")


def test_filter_attachments_preserves_order_of_survivors() -> None:
    engine = _engine([BLOCKED_GIF])
    png = Attachment(url="https://x.com/a.png", content_type="image/png")
    blocked = Attachment(url=BLOCKED_GIF, content_type="image/gif")
    allowed = Attachment(url=OTHER_GIF, content_type="image/gif")

    kept = engine.filter_attachments([png, blocked, allowed], message_id="m1")

    assert kept == [png, allowed]
    assert engine.tracker.is_blocked("m1")


def test_filter_attachments_prefers_proxy_when_url_missing() -> None:
    engine = _engine([BLOCKED_GIF])
    attachment = Attachment(proxy_url=BLOCKED_GIF, message_id="m1")
    assert engine.filter_attachments([attachment]) == []


def test_filter_attachments_keeps_everything_for_revealed_message() -> None:
    engine = _engine([BLOCKED_GIF])
    engine.tracker.set_temporarily_unblocked("m1", True)
    attachment = Attachment(url=BLOCKED_GIF, content_type="image/gif", message_id="m1")

    assert engine.filter_attachments([attachment]) == [attachment]


def test_filter_attachments_passes_non_lists_through() -> None:
    engine = _engine([BLOCKED_GIF])
    assert engine.filter_attachments(None) is None
    assert engine.filter_attachments("attachments") == "attachments"


def test_filter_attachments_fails_open(caplog) -> None:
    engine = _engine(store=BrokenPatternStore())
    attachments = [Attachment(url=BLOCKED_GIF, message_id="m1")]
    with caplog.at_level(logging.ERROR):
        assert engine.filter_attachments(attachments) is attachments
    assert "Attachment filtering failed" in caplog.text


def test_filter_message_combines_attachments_and_embeds() -> None:
    engine = _engine([BLOCKED_GIF])
    keep_embed = Embed(type="image", url=OTHER_GIF)
    message = _message(
        attachments=(Attachment(url=BLOCKED_GIF),),
        embeds=(Embed(type="gifv", url=BLOCKED_GIF), keep_embed),
    )

    result = engine.filter_message(message)

    assert result.attachments == ()
    assert result.embeds == (keep_embed,)
    assert result.blocked


def test_collect_gif_urls_deduplicates_in_order() -> None:
    engine = _engine()
    message = _message(
        attachments=(
            Attachment(url=BLOCKED_GIF, content_type="image/gif"),
            Attachment(url="https://x.com/a.png", content_type="image/png"),
            Attachment(url=BLOCKED_GIF),
        ),
        embeds=(
            Embed(type="gifv", url="https://tenor.com/view/cat-123"),
            Embed(type="gifv", image=MediaRef(url="https://x.com/ignored.gif")),
            Embed(type="image", image=MediaRef(url=OTHER_GIF)),
            Embed(type="rich", url="https://x.com/page"),
        ),
    )

    assert engine.collect_gif_urls(message) == [
        BLOCKED_GIF,
        "https://tenor.com/view/cat-123",
        OTHER_GIF,
    ]


def test_collect_gif_urls_isolates_scan_failures() -> None:
    class BrokenAttachment:
        @property
        def resolved_url(self) -> str:
            raise RuntimeError("bad record")

    engine = _engine()
    message = _message(
        attachments=(Attachment(url=BLOCKED_GIF), BrokenAttachment()),  # type: ignore[arg-type]
        embeds=(Embed(type="gifv", url=OTHER_GIF),),
    )

    assert engine.collect_gif_urls(message) == [BLOCKED_GIF, OTHER_GIF]


def test_affordance_absent_without_gifs() -> None:
    engine = _engine([BLOCKED_GIF])
    message = _message(attachments=(Attachment(url="https://x.com/a.png"),))
    assert engine.compute_affordance(message) is None


def test_affordance_cycle_reveal_and_hide_again() -> None:
    redrawer = FakeRedrawer()
    engine = _engine([BLOCKED_GIF], redrawer=redrawer)
    message = _message(embeds=(Embed(type="gifv", url=BLOCKED_GIF),))

    affordance = engine.compute_affordance(message)
    assert affordance is not None
    assert affordance.action is AffordanceAction.REVEAL
    assert affordance.label == "Show GIF"

    engine.apply_user_action(message, affordance)
    assert engine.tracker.is_temporarily_unblocked("m1")

    affordance = engine.compute_affordance(message)
    assert affordance is not None
    assert affordance.action is AffordanceAction.HIDE_AGAIN
    assert affordance.label == "Hide GIF"

    engine.apply_user_action(message, affordance)
    assert not engine.tracker.is_temporarily_unblocked("m1")
    assert redrawer.calls == [("c1", "m1"), ("c1", "m1")]


def test_block_action_merges_urls_and_redraws() -> None:
    store = FakePatternStore(["https://x.com/existing.gif"])
    redrawer = FakeRedrawer()
    engine = _engine(store=store, redrawer=redrawer)
    message = _message(
        attachments=(Attachment(url=BLOCKED_GIF, content_type="image/gif"),),
        embeds=(Embed(type="gifv", url=OTHER_GIF),),
    )

    affordance = engine.compute_affordance(message)
    assert affordance is not None
    assert affordance.action is AffordanceAction.BLOCK
    assert affordance.label == "Hide GIFs"

    engine.apply_user_action(message, affordance)

    assert store.patterns == ["https://x.com/existing.gif", BLOCKED_GIF, OTHER_GIF]
    assert redrawer.calls == [("c1", "m1")]
    assert engine.compute_affordance(message).action is AffordanceAction.REVEAL


def test_block_urls_twice_does_not_grow_blocklist() -> None:
    store = FakePatternStore()
    engine = _engine(store=store)
    message = _message()

    assert engine.block_urls(message, [BLOCKED_GIF]) == 1
    assert engine.block_urls(message, [BLOCKED_GIF + "?utm_source=share"]) == 0
    assert store.patterns == [BLOCKED_GIF]
    assert store.saves == 1


def test_redraw_failures_are_swallowed() -> None:
    engine = _engine([BLOCKED_GIF], redrawer=FailingRedrawer())
    message = _message()

    engine.reveal(message)

    assert engine.tracker.is_temporarily_unblocked("m1")


def test_accessory_note_follows_replacement_mode() -> None:
    message = _message(attachments=(Attachment(url=BLOCKED_GIF),))

    note_engine = _engine([BLOCKED_GIF], mode="note")
    assert note_engine.accessory_note(message) is None
    note_engine.filter_message(message)
    assert note_engine.accessory_note(message) == BLOCKED_NOTE

    hide_engine = _engine([BLOCKED_GIF], mode="hide")
    hide_engine.filter_message(message)
    assert hide_engine.tracker.is_blocked("m1")
    assert hide_engine.accessory_note(message) is None


def test_blocked_state_survives_blocklist_edits() -> None:
    store = FakePatternStore([BLOCKED_GIF])
    engine = _engine(store=store)
    message = _message(attachments=(Attachment(url=BLOCKED_GIF),))

    engine.filter_message(message)
    store.patterns = []

    result = engine.filter_message(message)
    assert result.attachments == message.attachments
    assert result.blocked
    assert engine.accessory_note(message) == BLOCKED_NOTE
