"""Raw-record facade for host render hooks.

The host's renderer hands over plain dicts. This adapter maps them into core
records, asks the engine, and hands the host's own objects back so the
renderer never sees core types.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Optional, Tuple

from adapters.record_mapper import (
    attachment_from_dict,
    embed_from_dict,
    message_from_dict,
    message_id_from_dict,
)
from core.engine import MediaFilterEngine
from core.models import AffordanceAction


class CallbackRedrawer:
    """RedrawPort that forwards to a host callable.

    The callable must only schedule the redraw; it is invoked synchronously
    from the user action.
    """

    def __init__(self, callback: Callable[[Optional[str], Optional[str]], Any]) -> None:
        self._callback = callback

    def request_redraw(self, channel_id: Optional[str], message_id: Optional[str]) -> None:
        self._callback(channel_id, message_id)


@dataclass(frozen=True)
class PopoverButton:
    """Description of the message popover button handed to the host."""

    label: str
    action: AffordanceAction
    urls: Tuple[str, ...]
    message_id: Optional[str]
    channel_id: Optional[str]
    on_click: Callable[[], None]


class HostBridge:
    """Adapts host dict records to the filter engine."""

    def __init__(self, engine: MediaFilterEngine) -> None:
        self._engine = engine

    def filter_attachments(self, raw_attachments: Any, raw_message: Any = None) -> Any:
        """Return the host attachments that should still be rendered."""

        if not isinstance(raw_attachments, list):
            return raw_attachments
        attachments = [attachment_from_dict(item) for item in raw_attachments]
        kept = self._engine.filter_attachments(attachments, message_id=message_id_from_dict(raw_message))
        return [attachment.raw for attachment in kept]

    def should_hide_embed(self, raw_embed: Any, raw_message: Any) -> bool:
        return self._engine.classify_embed(embed_from_dict(raw_embed), message_from_dict(raw_message))

    def popover_button(self, raw_message: Any) -> Optional[PopoverButton]:
        message = message_from_dict(raw_message)
        affordance = self._engine.compute_affordance(message)
        if affordance is None:
            return None
        return PopoverButton(
            label=affordance.label,
            action=affordance.action,
            urls=affordance.urls,
            message_id=message.id,
            channel_id=message.channel_id,
            on_click=partial(self._engine.apply_user_action, message, affordance),
        )

    def accessory_note(self, raw_message: Any) -> Optional[str]:
        return self._engine.accessory_note(message_from_dict(raw_message))
