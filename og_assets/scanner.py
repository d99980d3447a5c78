"""Source discovery and content fingerprinting."""

from __future__ import annotations

import hashlib
import logging
from collections import deque
from pathlib import Path
from typing import Iterable, List

from .models import SOURCE_SUFFIX, AssetPair, Category

logger = logging.getLogger(__name__)

FINGERPRINT_LENGTH = 16


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def fingerprint_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()[:FINGERPRINT_LENGTH]


def compute_fingerprint(path: Path) -> str:
    """Short SHA-256 digest of a file's bytes. Raises OSError if unreadable."""
    hasher = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            hasher.update(chunk)
    return hasher.hexdigest()[:FINGERPRINT_LENGTH]


def _scan_directory(category: Category, recursive: bool) -> List[AssetPair]:
    pairs: List[AssetPair] = []
    queue = deque([category.directory])
    while queue:
        current_dir = queue.popleft()
        try:
            entries = sorted(current_dir.iterdir())
        except OSError as exc:
            logger.error("Error scanning %s directory %s: %s", category.name, current_dir, exc)
            continue

        for entry in entries:
            if _is_hidden(entry):
                continue

            if entry.is_dir():
                # Symlinked directories can form cycles.
                if recursive and not entry.is_symlink():
                    queue.append(entry)
                continue

            if entry.suffix.lower() == SOURCE_SUFFIX and entry.is_file():
                pairs.append(AssetPair.from_source(entry, category.name))
    return pairs


def discover(categories: Iterable[Category], recursive: bool = False) -> List[AssetPair]:
    """Collect asset pairs for every category, creating missing directories."""
    pairs: List[AssetPair] = []
    for category in categories:
        try:
            category.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Cannot create %s directory %s: %s", category.name, category.directory, exc)
            continue

        found = _scan_directory(category, recursive)
        logger.debug("Found %d SVG files in %s", len(found), category.name)
        pairs.extend(found)
    return pairs
