"""JSON-backed fingerprint cache."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


def relative_key(path: Path, root: Path) -> str:
    """Portable identity of a source file: its POSIX path relative to root."""
    return Path(os.path.relpath(path.resolve(), root.resolve())).as_posix()


class FingerprintCache:
    """Maps relative source paths to the fingerprint of their last good conversion."""

    def __init__(self, path: Path, root: Path, entries: Optional[Dict[str, str]] = None):
        self.path = path
        self.root = root
        self.entries: Dict[str, str] = dict(entries or {})
        self.dirty = False

    @classmethod
    def load(cls, path: Path, root: Path) -> "FingerprintCache":
        """Read the cache file; anything unusable yields an empty cache."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            data = {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable cache %s: %s", path, exc)
            data = {}

        if not isinstance(data, dict):
            logger.warning("Ignoring cache %s: expected a JSON object", path)
            data = {}
        entries = {str(k): v for k, v in data.items() if isinstance(v, str)}
        return cls(path, root, entries)

    def key_for(self, source: Path) -> str:
        return relative_key(source, self.root)

    def get(self, source: Path) -> Optional[str]:
        return self.entries.get(self.key_for(source))

    def record(self, source: Path, fingerprint: str) -> None:
        key = self.key_for(source)
        if self.entries.get(key) != fingerprint:
            self.entries[key] = fingerprint
            self.dirty = True

    def save(self) -> bool:
        """Persist if modified. Returns True when the file was written."""
        if not self.dirty:
            return False
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(self.entries, f, indent=2, sort_keys=True)
            f.write("\n")
        self.dirty = False
        logger.info("Saved %d cache entries to %s", len(self.entries), self.path)
        return True

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, source: Path) -> bool:
        return self.key_for(source) in self.entries
