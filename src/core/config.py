"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

REPLACEMENT_MODES = ("note", "hide")
DEFAULT_REPLACEMENT_MODE = "note"


@dataclass(frozen=True)
class FilterConfig:
    """Rendering settings for suppressed media."""

    replacement_mode: str = DEFAULT_REPLACEMENT_MODE

    def __post_init__(self) -> None:
        if self.replacement_mode not in REPLACEMENT_MODES:
            raise ValueError(f"Unsupported replacement mode: {self.replacement_mode}")

    @property
    def shows_note(self) -> bool:
        return self.replacement_mode == "note"
