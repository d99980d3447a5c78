"""Command-line entrypoints for the OG image builder."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from . import config, converter, reporting, worker
from .models import SOURCE_SUFFIX, AssetPair, ConversionTask


def _configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _print_progress(completed: int, total: int, name: str) -> None:
    sys.stdout.write("\r" + reporting.progress_line(completed, total, name))
    if completed == total:
        sys.stdout.write("\n")
    sys.stdout.flush()


def _build_config(args) -> config.Config:
    return config.Config(
        root=Path(getattr(args, "root", config.DEFAULT_ROOT)),
        cache_file=getattr(args, "cache_file", None),
        concurrency=getattr(args, "concurrency", config.CONCURRENCY_LIMIT),
        force=getattr(args, "force", False),
        recursive=getattr(args, "recursive", False),
        timeout=getattr(args, "timeout", None),
    )


def cmd_build(args) -> None:
    cfg = _build_config(args)
    if not cfg.root.exists() or not cfg.root.is_dir():
        raise SystemExit(f"Project root does not exist or is not a directory: {cfg.root}")

    print("Converting SVG images to PNG...")
    summary = asyncio.run(worker.process_assets(cfg, progress=_print_progress))
    print(reporting.format_summary(summary))


def cmd_convert(args) -> None:
    svg_path = Path(args.svg_file).resolve()
    if not svg_path.is_file():
        raise SystemExit(f"Not a file: {svg_path}")
    if svg_path.suffix.lower() != SOURCE_SUFFIX:
        raise SystemExit(f"File must have {SOURCE_SUFFIX} extension: {svg_path}")

    cfg = _build_config(args)
    task = ConversionTask(AssetPair.from_source(svg_path, "single"))
    print(f"Converting {svg_path.name} in {svg_path.parent}")
    if not asyncio.run(converter.convert_asset(task, cfg)):
        raise SystemExit(f"Conversion failed: {svg_path.name}")

    print(f"Input:  {reporting.describe_file(svg_path)}")
    print(f"Output: {reporting.describe_file(task.pair.output)}")
    print(f"Size:   {cfg.width}x{cfg.height} pixels")


def cmd_convert_dir(args) -> None:
    directory = Path(args.directory).resolve()
    try:
        sources = sorted(
            entry
            for entry in directory.iterdir()
            if entry.is_file() and entry.suffix.lower() == SOURCE_SUFFIX
        )
    except OSError as exc:
        raise SystemExit(f"Error accessing directory {directory}: {exc}")

    if not sources:
        print(f"No SVG files found in {directory}")
        return

    cfg = _build_config(args)
    print(f"Found {len(sources)} SVG file(s) in {directory}")
    tasks = [ConversionTask(AssetPair.from_source(src, directory.name)) for src in sources]
    summary = asyncio.run(worker.convert_paths(tasks, cfg, progress=_print_progress))
    print(reporting.format_batch_summary(summary))


def cmd_explain_structure(args) -> None:
    print(reporting.render_folder_structure_table(_build_config(args)))


def _add_location_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    parser.add_argument(
        "--root",
        type=Path,
        default=argparse.SUPPRESS if suppress else config.DEFAULT_ROOT,
        help="Project root containing public/images (default: current directory)",
    )
    parser.add_argument(
        "--cache-file",
        type=Path,
        default=argparse.SUPPRESS if suppress else None,
        help="Cache file (default: <root>/.png-cache.json)",
    )


def _add_tuning_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    parser.add_argument(
        "--concurrency",
        type=_positive_int,
        default=argparse.SUPPRESS if suppress else config.CONCURRENCY_LIMIT,
        help=f"Conversions in flight at once (default {config.CONCURRENCY_LIMIT})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=argparse.SUPPRESS if suppress else None,
        help="Per-file timeout in seconds",
    )


def _add_build_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    _add_location_options(parser, suppress)
    _add_tuning_options(parser, suppress)
    parser.add_argument(
        "--force",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="Ignore the cache and reconvert everything",
    )
    parser.add_argument(
        "--recursive",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="Descend into category subdirectories",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build 1200x630 PNG social previews from SVG sources. "
        "Without a command, converts every out-of-date SVG in all categories."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    # Subcommands repeat these with suppressed defaults; values given before
    # the command carry through.
    _add_build_options(parser)
    parser.set_defaults(func=cmd_build)

    subparsers = parser.add_subparsers(dest="command")

    build_cmd = subparsers.add_parser("build", help="Same as running without a command")
    _add_build_options(build_cmd, suppress=True)
    build_cmd.set_defaults(func=cmd_build)

    convert_parser = subparsers.add_parser("convert", help="Convert a single SVG file")
    convert_parser.add_argument("svg_file", help="Path to the SVG file")
    convert_parser.set_defaults(func=cmd_convert)

    dir_parser = subparsers.add_parser("convert-dir", help="Convert every SVG in one directory, ignoring the cache")
    _add_tuning_options(dir_parser, suppress=True)
    dir_parser.add_argument("directory", help="Directory containing SVG files")
    dir_parser.set_defaults(func=cmd_convert_dir)

    explain_parser = subparsers.add_parser("explain-structure", help="Describe the folder layout")
    _add_location_options(explain_parser, suppress=True)
    explain_parser.set_defaults(func=cmd_explain_structure)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
