"""Decides which asset pairs need regenerating."""

from __future__ import annotations

import functools
import logging
from typing import Callable

from .cache import FingerprintCache
from .config import MIN_OUTPUT_BYTES
from .models import AssetPair
from .scanner import compute_fingerprint

logger = logging.getLogger(__name__)

FreshnessCheck = Callable[[AssetPair, FingerprintCache], bool]


def _output_is_valid(pair: AssetPair, min_output_bytes: int) -> bool:
    try:
        return pair.output.stat().st_size > min_output_bytes
    except OSError:
        return False


def needs_conversion(
    pair: AssetPair,
    cache: FingerprintCache,
    *,
    force: bool = False,
    min_output_bytes: int = MIN_OUTPUT_BYTES,
) -> bool:
    """Content-hash freshness policy.

    Regenerate when forced, when the output is missing or implausibly small,
    when the source cannot be fingerprinted, or when its fingerprint differs
    from the one recorded at the last successful conversion.
    """
    if force:
        return True

    if not _output_is_valid(pair, min_output_bytes):
        logger.debug("%s: output missing or truncated", pair.source.name)
        return True

    try:
        current = compute_fingerprint(pair.source)
    except OSError as exc:
        logger.warning("Cannot fingerprint %s, converting anyway: %s", pair.source, exc)
        return True

    if current == cache.get(pair.source):
        logger.debug("%s: up to date", pair.source.name)
        return False
    return True


def content_hash_check(force: bool = False, min_output_bytes: int = MIN_OUTPUT_BYTES) -> FreshnessCheck:
    return functools.partial(needs_conversion, force=force, min_output_bytes=min_output_bytes)
