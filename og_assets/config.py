"""Configuration defaults for the OG image builder."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .models import Category

# Default locations; can be overridden via CLI args.
DEFAULT_ROOT = Path(".")
DEFAULT_CACHE_NAME = ".png-cache.json"
IMAGES_SUBDIR = Path("public") / "images"

CATEGORY_NAMES: Tuple[str, ...] = (
    "posts",
    "guides",
    "exercises",
    "news",
    "checklists",
    "interview-questions",
)

# Open Graph preview slot.
CANONICAL_WIDTH = 1200
CANONICAL_HEIGHT = 630
BACKGROUND = "white"

CONCURRENCY_LIMIT = 8
# Outputs at or below this size are treated as truncated.
MIN_OUTPUT_BYTES = 500


@dataclass
class Config:
    """Settings for one build run."""

    root: Path = DEFAULT_ROOT
    cache_file: Optional[Path] = None
    category_names: Tuple[str, ...] = CATEGORY_NAMES
    width: int = CANONICAL_WIDTH
    height: int = CANONICAL_HEIGHT
    background: str = BACKGROUND
    concurrency: int = CONCURRENCY_LIMIT
    force: bool = False
    recursive: bool = False
    timeout: Optional[float] = None
    min_output_bytes: int = MIN_OUTPUT_BYTES

    @property
    def images_dir(self) -> Path:
        return self.root / IMAGES_SUBDIR

    @property
    def cache_path(self) -> Path:
        return self.cache_file if self.cache_file is not None else self.root / DEFAULT_CACHE_NAME

    def categories(self) -> List[Category]:
        return [Category(name, self.images_dir / name) for name in self.category_names]
