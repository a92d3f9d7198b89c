"""State container for config loading and dirty tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ConfigState:
    data: dict[str, Any] | None = None
    dirty: bool = False
    error: str | None = None
    # Row indexes the user touched since the last save, for table badges.
    edited_rows: set[int] = field(default_factory=set)
