"""Command-line entry point for the Markdown to PDF converter."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

from .config import ConvertConfig
from .converter import convert_directory, convert_single
from .models import ConversionResult

logger = logging.getLogger("mdtopdf.cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdtopdf",
        description="Convert Markdown files (and Obsidian vaults) to PDF.",
        add_help=False,
    )
    parser.add_argument(
        "-f",
        "--file",
        nargs="?",
        const="",
        default=None,
        metavar="FILE",
        help="Convert a single Markdown file to PDF.",
    )
    parser.add_argument(
        "-a",
        "--all",
        nargs="?",
        const="",
        default=None,
        metavar="DIRECTORY",
        help="Convert all Markdown files in a directory (default: current) to PDF.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of files converted in parallel (default: CPU count)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-h",
        "--help",
        action="store_true",
        help="Show this help message.",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _build_config(args: argparse.Namespace) -> ConvertConfig:
    if args.workers is None:
        return ConvertConfig()
    if args.workers < 1:
        raise ValueError("--workers must be at least 1.")
    return ConvertConfig(workers=args.workers)


def _run_file(args: argparse.Namespace, config: ConvertConfig) -> int:
    if not args.file:
        raise ValueError("Missing file path.")
    source = Path(args.file)
    if not source.is_file():
        raise FileNotFoundError(f"The specified file does not exist: {source}")
    result = asyncio.run(convert_single(source, config))
    return EXIT_OK if result.ok else EXIT_FAILURE


def _run_all(args: argparse.Namespace, config: ConvertConfig) -> int:
    overall_start = time.perf_counter()
    results: List[ConversionResult] = asyncio.run(
        convert_directory(args.all or None, config)
    )
    total_elapsed = time.perf_counter() - overall_start

    failures = sum(1 for result in results if not result.ok)
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        len(results) - failures,
        len(results),
        failures,
    )
    for result in results:
        logger.debug(
            "Timing for %s -> %s: %.2fs",
            result.source_path,
            result.output_path,
            result.total_seconds,
        )
    return EXIT_FAILURE if failures else EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        parser.print_help(sys.stdout)
        return EXIT_OK

    args, unknown = parser.parse_known_args(argv)
    if args.help:
        parser.print_help(sys.stdout)
        return EXIT_OK
    if unknown or (args.file is None) == (args.all is None):
        print("✘ Invalid command.")
        parser.print_help(sys.stdout)
        return EXIT_USAGE

    _configure_logging(args.verbose)
    try:
        config = _build_config(args)
        if args.file is not None:
            return _run_file(args, config)
        return _run_all(args, config)
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Error: {exc}")
        logger.debug("Unhandled error", exc_info=True)
        return EXIT_FAILURE


def run() -> None:
    """Console script wrapper that turns ``main``'s result into an exit code."""
    sys.exit(main())


if __name__ == "__main__":
    run()
