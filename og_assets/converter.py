"""SVG rasterization layer using CairoSVG and Pillow."""

from __future__ import annotations

import asyncio
import contextlib
import io
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

import cairosvg
from PIL import Image, ImageOps

from .config import BACKGROUND, CANONICAL_HEIGHT, CANONICAL_WIDTH, Config
from .models import ConversionTask
from .scanner import fingerprint_bytes

logger = logging.getLogger(__name__)


def render_png(
    svg_bytes: bytes,
    width: int = CANONICAL_WIDTH,
    height: int = CANONICAL_HEIGHT,
    background: str = BACKGROUND,
) -> bytes:
    """Render SVG markup to a PNG of exactly ``width`` x ``height``.

    The SVG is first rasterized at the target width over an opaque background,
    then padded into the canonical box without cropping.
    """
    raster = cairosvg.svg2png(
        bytestring=svg_bytes,
        output_width=width,
        background_color=background,
    )
    with Image.open(io.BytesIO(raster)) as img:
        rgb = img.convert("RGB")
    fitted = ImageOps.pad(
        rgb,
        (width, height),
        method=Image.Resampling.LANCZOS,
        color=background,
    )
    out = io.BytesIO()
    fitted.save(out, format="PNG", optimize=True)
    return out.getvalue()


def write_atomic(path: Path, data: bytes) -> None:
    """Write via a sibling temp file so readers never see a partial output."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


class ConversionAbandoned(Exception):
    """Raised in the worker thread when the caller gave up before the write."""


class _Attempt:
    """Hand-off between a conversion thread and the coroutine awaiting it.

    Exactly one side wins: either the thread commits to writing the output, or
    the coroutine abandons the attempt and no output is written.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.abandoned = False
        self.committed = False

    def commit(self) -> bool:
        with self._lock:
            if not self.abandoned:
                self.committed = True
            return self.committed

    def abandon(self) -> bool:
        """Returns True if the thread had already committed."""
        with self._lock:
            if not self.committed:
                self.abandoned = True
            return self.committed


def convert_file(source: Path, output: Path, config: Config, attempt: Optional[_Attempt] = None) -> str:
    """Blocking read, render and write. Returns the fingerprint of the rendered bytes."""
    svg_bytes = source.read_bytes()
    png_bytes = render_png(svg_bytes, config.width, config.height, config.background)
    if attempt is not None and not attempt.commit():
        raise ConversionAbandoned(f"{source.name} was abandoned before writing")
    write_atomic(output, png_bytes)
    return fingerprint_bytes(svg_bytes)


async def convert_asset(task: ConversionTask, config: Config) -> bool:
    """Convert one source to its output. Failures are logged, never raised.

    With ``config.timeout`` set, a conversion that overruns is reported as
    failed and its output is not written. The worker thread is still awaited
    before returning so it keeps counting against the concurrency limit.
    """
    source = task.pair.source
    attempt = _Attempt()
    future = asyncio.ensure_future(
        asyncio.to_thread(convert_file, source, task.pair.output, config, attempt)
    )
    try:
        if config.timeout is not None:
            done, _ = await asyncio.wait({future}, timeout=config.timeout)
            if not done and not attempt.abandon():
                logger.error("Timed out converting %s after %ss", source.name, config.timeout)
                with contextlib.suppress(ConversionAbandoned):
                    await future
                return False
        fingerprint = await future
    except Exception as exc:
        logger.error("Error converting %s: %s", source.name, exc)
        return False

    task.fingerprint = fingerprint
    task.done = True
    logger.debug("Converted %s -> %s", source.name, task.pair.output.name)
    return True
