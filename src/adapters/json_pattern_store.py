"""JSON config storage adapter.

Implements the core PatternStorePort on top of the ``patterns`` list in
config.json, the same file the config panel edits.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

LOGGER = logging.getLogger(__name__)

PATTERNS_KEY = "patterns"


class JsonPatternStore:
    """Thin JSON file wrapper that satisfies the PatternStorePort contract."""

    def __init__(self, config_path: Union[str, Path]) -> None:
        self._path = Path(config_path)
        self._cache: Optional[Tuple[int, List[str]]] = None

    @property
    def path(self) -> Path:
        return self._path

    def get_patterns(self) -> List[str]:
        """Return the stored patterns, re-reading the file only when it changed."""

        try:
            mtime = self._path.stat().st_mtime_ns
        except FileNotFoundError:
            return []

        if self._cache is not None and self._cache[0] == mtime:
            return list(self._cache[1])

        raw = self.load_document().get(PATTERNS_KEY)
        patterns = [item for item in raw if isinstance(item, str)] if isinstance(raw, list) else []
        self._cache = (mtime, patterns)
        return list(patterns)

    def set_patterns(self, patterns: Sequence[str]) -> None:
        """Replace the stored patterns, keeping every other config section."""

        data = self.load_document()
        data[PATTERNS_KEY] = list(patterns)
        self.save_document(data)
        LOGGER.debug("Saved %s pattern(s) to %s", len(data[PATTERNS_KEY]), self._path)

    def load_document(self) -> dict[str, Any]:
        """Return the whole config document, or an empty one if the file is missing."""

        if not self._path.exists():
            return {}
        try:
            loaded = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"{self._path.name} error: {exc.msg}") from exc
        if not isinstance(loaded, dict):
            raise ValueError("config root must be an object")
        return loaded

    def save_document(self, data: dict[str, Any]) -> None:
        # Written to a sibling file, then swapped in atomically.
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        tmp_path.write_text(
            json.dumps(data, indent=2, ensure_ascii=True) + "\n",
            encoding="utf-8",
        )
        os.replace(tmp_path, self._path)
        self._cache = None
