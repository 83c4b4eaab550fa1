"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        node: Any = self._data
        for part in key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def get_int(self, key: str, default: int) -> int:
        """Return `key` as int, or `default` when missing or not numeric."""
        try:
            return int(self.get(key, default))
        except (TypeError, ValueError):
            return default

    def get_path(self, key: str, default: str | Path) -> Path:
        """Return `key` as a path with ``~`` and environment variables expanded."""
        raw = self.get(key) or default
        return Path(os.path.expandvars(os.path.expanduser(str(raw))))
