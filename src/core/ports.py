"""Ports (interfaces) used by the filter engine.

Ports define the minimal contracts for pattern storage and message redraws so
that the core can be reused with different hosts and settings backends.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence


class PatternStorePort(Protocol):
    """Persisted blocklist accessor owned by settings storage."""

    def get_patterns(self) -> List[str]:
        ...

    def set_patterns(self, patterns: Sequence[str]) -> None:
        ...


class RedrawPort(Protocol):
    """Best-effort request to re-render a single message."""

    def request_redraw(self, channel_id: Optional[str], message_id: Optional[str]) -> None:
        ...
