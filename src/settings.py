"""Static configuration for gifblock.

All user-editable settings (blocked GIF URLs, replacement mode, logging) live
in a single JSON file for quick edits without touching Python.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv

from core.config import DEFAULT_REPLACEMENT_MODE, REPLACEMENT_MODES, FilterConfig

LOGGER = logging.getLogger(__name__)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Blocklist and surface settings are loaded from config.json so users can edit
# patterns by hand or through the config panel.
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

# Environment override for the config location (also read from .env).
CONFIG_PATH_ENV = "GIFBLOCK_CONFIG"

DEFAULT_LOG_PATH = "logs/gifblock.log"
DEFAULT_LOG_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 5


def resolve_config_path() -> str:
    """Return the config.json path, honouring GIFBLOCK_CONFIG."""

    load_dotenv()
    path = os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH
    if not os.path.isabs(path):
        path = os.path.join(PROJECT_ROOT, path)
    return path


def load_config(path: Optional[str] = None) -> dict[str, Any]:
    """Load config.json with a flat, user-friendly schema.

    A missing file yields an empty config so defaults apply.
    """

    path = path or resolve_config_path()
    if not os.path.exists(path):
        LOGGER.info("Config file not found at %s, using defaults", path)
        return {}

    with open(path, "r", encoding="utf-8") as handle:
        try:
            loaded = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"config.json error: {exc.msg}") from exc

    if not isinstance(loaded, dict):
        raise ValueError("config root must be an object")
    return loaded


def build_filter_config(config: dict[str, Any]) -> FilterConfig:
    """Build the core FilterConfig, falling back to the default mode."""

    # - "note": show an italic "GIF Blocked" marker under the message
    # - "hide": show nothing at all
    mode = config.get("replacement_mode", DEFAULT_REPLACEMENT_MODE)
    if mode not in REPLACEMENT_MODES:
        LOGGER.warning("Unknown replacement_mode %r, using %r", mode, DEFAULT_REPLACEMENT_MODE)
        mode = DEFAULT_REPLACEMENT_MODE
    return FilterConfig(replacement_mode=mode)


@dataclass(frozen=True)
class LogFileConfig:
    """Size-rotated log file settings."""

    path: str = DEFAULT_LOG_PATH
    max_bytes: int = DEFAULT_LOG_MAX_BYTES
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT

    @property
    def absolute_path(self) -> str:
        if os.path.isabs(self.path):
            return self.path
        return os.path.join(PROJECT_ROOT, self.path)


@dataclass(frozen=True)
class LoggingConfig:
    """Parsed ``logging`` section; ``file`` is None when file logging is off."""

    enabled: bool = False
    level: int = logging.INFO
    console: bool = True
    file: Optional[LogFileConfig] = None


def _section(parent: dict[str, Any], key: str) -> dict[str, Any]:
    value = parent.get(key, {})
    return value if isinstance(value, dict) else {}


def build_logging_config(config: dict[str, Any]) -> LoggingConfig:
    """Parse the optional logging section into a LoggingConfig."""

    section = _section(config, "logging")
    level_name = str(section.get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        LOGGER.warning("Unknown log level %r, using INFO", level_name)
        level = logging.INFO

    file_section = _section(section, "file")
    log_file = None
    if file_section.get("enabled", False):
        log_file = LogFileConfig(
            path=str(file_section.get("path") or DEFAULT_LOG_PATH),
            max_bytes=int(file_section.get("max_bytes", DEFAULT_LOG_MAX_BYTES)),
            backup_count=int(file_section.get("backup_count", DEFAULT_LOG_BACKUP_COUNT)),
        )

    return LoggingConfig(
        enabled=bool(section.get("enabled", False)),
        level=level,
        console=bool(section.get("console", True)),
        file=log_file,
    )
