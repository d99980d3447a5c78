"""Progress and summary rendering, plus the folder layout explanation."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from .cache import FingerprintCache
from .config import Config
from .models import OUTPUT_SUFFIX, SOURCE_SUFFIX, Category, RunSummary

BAR_WIDTH = 50


def progress_line(completed: int, total: int, name: str) -> str:
    """Single-line progress bar, e.g. ``[███░░] 60% (3/5) - post.svg``."""
    percentage = round(completed / total * 100) if total else 100
    filled = percentage * BAR_WIDTH // 100
    bar = "█" * filled + "░" * (BAR_WIDTH - filled)
    return f"[{bar}] {percentage}% ({completed}/{total}) - {name}"


def format_summary(summary: RunSummary) -> str:
    if summary.total == 0:
        return f"All PNG images are up to date ({summary.skipped} checked)."

    lines: List[str] = []
    if summary.failed:
        lines.append("Failed conversions:")
        for name in summary.failed:
            lines.append(f"  {name}")
        lines.append("")

    lines.append("SVG to PNG conversion complete")
    lines.append(f"  Total time: {summary.duration:.2f}s")
    lines.append(f"  Average: {summary.duration / summary.total:.3f}s per conversion")
    lines.append(f"  Skipped (up to date): {summary.skipped}")
    lines.append(f"Successfully converted {summary.completed}/{summary.total} images")
    return "\n".join(lines)


def format_batch_summary(summary: RunSummary) -> str:
    lines = ["Batch conversion summary:"]
    lines.append(f"  Successful: {summary.completed}")
    lines.append(f"  Failed: {len(summary.failed)}")
    for name in summary.failed:
        lines.append(f"    {name}")
    lines.append(f"  Total: {summary.total}")
    return "\n".join(lines)


def _count_files(directory: Path, suffix: str) -> int:
    return sum(1 for entry in directory.iterdir() if entry.suffix.lower() == suffix)


def _describe_category(category: Category) -> str:
    if not category.directory.is_dir():
        return f"{category.name}: not created yet"
    sources = _count_files(category.directory, SOURCE_SUFFIX)
    outputs = _count_files(category.directory, OUTPUT_SUFFIX)
    return f"{category.name}: {sources} SVG sources, {outputs} PNG outputs"


def folder_structure_table(config: Config) -> List[Tuple[str, str]]:
    """Return (path, contents) rows for the image tree and the cache file."""
    rows = [(f"{config.images_dir}/", f"Preview images, {config.width}x{config.height} PNG")]
    rows.extend((f"{category.directory}/", _describe_category(category)) for category in config.categories())

    cache = FingerprintCache.load(config.cache_path, config.root)
    rows.append((str(config.cache_path), f"Fingerprint cache, {len(cache)} entries"))
    return rows


def render_folder_structure_table(config: Config) -> str:
    rows = [("Path", "Contents")] + folder_structure_table(config)
    width = max(len(path) for path, _ in rows)
    lines = [f"{path:<{width}}  {desc}" for path, desc in rows]
    lines.insert(1, "=" * width + "  " + "=" * max(len(desc) for _, desc in rows))
    return "\n".join(lines)


def describe_file(path: Path) -> str:
    """Human-readable size of a file, e.g. ``post.png (12.3 KB)``."""
    return f"{path.name} ({path.stat().st_size / 1024:.1f} KB)"
