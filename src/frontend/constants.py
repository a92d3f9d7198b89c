"""Shared constants for the Textual UI."""

from __future__ import annotations

from pathlib import Path

import settings

ACCENT_PINK = "#E8467C"
CONFIG_PATH = Path(settings.resolve_config_path())
