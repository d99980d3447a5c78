"""Dataclasses used throughout the asset pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

SOURCE_SUFFIX = ".svg"
OUTPUT_SUFFIX = ".png"


@dataclass(frozen=True)
class Category:
    name: str
    directory: Path


@dataclass(frozen=True)
class AssetPair:
    source: Path
    output: Path
    category: str

    @classmethod
    def from_source(cls, source: Path, category: str) -> "AssetPair":
        """Pair a source with the sibling output of the same stem."""
        return cls(source=source, output=source.with_suffix(OUTPUT_SUFFIX), category=category)


@dataclass
class ConversionTask:
    pair: AssetPair
    done: bool = False
    # Digest of the exact bytes that were rasterized.
    fingerprint: Optional[str] = None

    @property
    def name(self) -> str:
        return self.pair.source.name

    def __str__(self) -> str:
        return self.name


@dataclass
class RunSummary:
    discovered: int = 0
    total: int = 0
    completed: int = 0
    skipped: int = 0
    failed: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.failed
