"""Per-session message override state (core domain)."""

from __future__ import annotations

from typing import Optional, Set


class OverrideTracker:
    """Tracks which messages were blocked and which the user chose to reveal.

    One tracker lives for one viewing session; the owner creates it at session
    start and drops it at session end. Blocked membership is sticky: once a
    message had something suppressed it stays flagged for the session, even
    if the blocklist is edited afterwards.
    """

    def __init__(self) -> None:
        self._blocked: Set[str] = set()
        self._temporarily_unblocked: Set[str] = set()

    def mark_blocked(self, message_id: Optional[str]) -> None:
        if message_id:
            self._blocked.add(message_id)

    def is_blocked(self, message_id: Optional[str]) -> bool:
        return bool(message_id) and message_id in self._blocked

    def is_temporarily_unblocked(self, message_id: Optional[str]) -> bool:
        return bool(message_id) and message_id in self._temporarily_unblocked

    def set_temporarily_unblocked(self, message_id: Optional[str], unblocked: bool) -> None:
        if not message_id:
            return
        if unblocked:
            self._temporarily_unblocked.add(message_id)
        else:
            self._temporarily_unblocked.discard(message_id)

    @property
    def blocked_ids(self) -> frozenset[str]:
        return frozenset(self._blocked)

    @property
    def temporarily_unblocked_ids(self) -> frozenset[str]:
        return frozenset(self._temporarily_unblocked)
