"""Bounded-concurrency executor and the conversion pipeline built on it."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from . import converter, scanner
from .cache import FingerprintCache
from .config import Config
from .detector import FreshnessCheck, content_hash_check
from .models import ConversionTask, RunSummary

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[int, int, str], None]


async def _settle(
    item: T,
    unit: Callable[[T], Awaitable[bool]],
    on_settled: Optional[Callable[[T, bool], None]],
) -> bool:
    try:
        ok = bool(await unit(item))
    except Exception:
        logger.exception("Task %s failed", item)
        ok = False

    if on_settled is not None:
        try:
            on_settled(item, ok)
        except Exception:
            logger.exception("Completion handler failed for %s", item)
    return ok


async def run_in_chunks(
    items: Sequence[T],
    unit: Callable[[T], Awaitable[bool]],
    concurrency: int,
    *,
    on_settled: Optional[Callable[[T, bool], None]] = None,
) -> List[bool]:
    """Run ``unit`` over ``items`` with at most ``concurrency`` in flight.

    Items are processed in consecutive chunks; a chunk starts only after every
    task of the previous one has settled. Results are returned in input order.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    results: List[bool] = []
    for start in range(0, len(items), concurrency):
        chunk = items[start : start + concurrency]
        outcomes = await asyncio.gather(*(_settle(item, unit, on_settled) for item in chunk))
        results.extend(outcomes)
    return results


async def process_assets(
    config: Config,
    check: Optional[FreshnessCheck] = None,
    progress: Optional[ProgressCallback] = None,
) -> RunSummary:
    """Discover, filter, convert and record every out-of-date asset."""
    started = time.monotonic()
    if check is None:
        check = content_hash_check(force=config.force, min_output_bytes=config.min_output_bytes)

    cache = FingerprintCache.load(config.cache_path, config.root)
    pairs = scanner.discover(config.categories(), recursive=config.recursive)
    tasks = [ConversionTask(pair) for pair in pairs if check(pair, cache)]

    summary = RunSummary(discovered=len(pairs), total=len(tasks), skipped=len(pairs) - len(tasks))
    if not tasks:
        summary.duration = time.monotonic() - started
        return summary

    logger.info(
        "Converting %d of %d SVG files with concurrency %d",
        summary.total,
        summary.discovered,
        config.concurrency,
    )
    settled = 0

    def on_settled(task: ConversionTask, ok: bool) -> None:
        nonlocal settled
        settled += 1
        if ok and task.fingerprint:
            cache.record(task.pair.source, task.fingerprint)
            summary.completed += 1
        else:
            summary.failed.append(task.name)
        if progress is not None:
            progress(settled, summary.total, task.name)

    async def unit(task: ConversionTask) -> bool:
        return await converter.convert_asset(task, config)

    await run_in_chunks(tasks, unit, config.concurrency, on_settled=on_settled)

    cache.save()
    summary.duration = time.monotonic() - started
    return summary


async def convert_paths(
    tasks: Sequence[ConversionTask],
    config: Config,
    progress: Optional[ProgressCallback] = None,
) -> RunSummary:
    """Convert the given tasks unconditionally, without touching the cache."""
    started = time.monotonic()
    summary = RunSummary(discovered=len(tasks), total=len(tasks))
    settled = 0

    def on_settled(task: ConversionTask, ok: bool) -> None:
        nonlocal settled
        settled += 1
        if ok:
            summary.completed += 1
        else:
            summary.failed.append(task.name)
        if progress is not None:
            progress(settled, summary.total, task.name)

    async def unit(task: ConversionTask) -> bool:
        return await converter.convert_asset(task, config)

    await run_in_chunks(list(tasks), unit, config.concurrency, on_settled=on_settled)
    summary.duration = time.monotonic() - started
    return summary
