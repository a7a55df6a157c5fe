"""
Run a feed import from the command line.

    feed-import product ./feeds/products.csv csv

Exit code 0 when the run completes (rows may still have been skipped),
1 on any fatal error.
"""

from __future__ import annotations

import argparse
import logging
import resource
import sys
import time
from collections.abc import Sequence

from db.session import SessionLocal
from feed_import.config import MAX_BATCH_SIZE
from feed_import.errors import BatchWriteError, FeedImportError
from feed_import.logging_utils import configure_logging
from feed_import.types import ImportResult
from feed_import.wiring import build_orchestrator

logger = logging.getLogger(__name__)


def _batch_size(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from exc
    if not 1 <= value <= MAX_BATCH_SIZE:
        raise argparse.ArgumentTypeError(f"must be between 1 and {MAX_BATCH_SIZE}, got {value}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Import a delimited feed file with idempotent upserts."
    )
    parser.add_argument("target", help="Import target, e.g. 'product'.")
    parser.add_argument("path", help="Path to the feed file.")
    parser.add_argument(
        "format",
        nargs="?",
        default="csv",
        help="Feed format (default: csv).",
    )
    parser.add_argument(
        "--batch-size",
        dest="batch_size",
        type=_batch_size,
        default=None,
        help=f"Rows per upsert batch, at most {MAX_BATCH_SIZE}. Defaults to FEED_IMPORT_BATCH_SIZE or 1000.",
    )
    return parser


def _peak_memory_mb() -> float:
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is bytes on macOS, kilobytes elsewhere.
    if sys.platform == "darwin":
        return peak / (1024 * 1024)
    return peak / 1024


def _print_summary(result: ImportResult, elapsed: float) -> None:
    print(f"Processed: {result.processed}")
    print(f"Skipped: {result.skipped}")
    for message in result.errors:
        print(f"  {message}")
    if result.skipped and len(result.errors) < result.skipped:
        print("  (error list truncated; see logs for the remaining rows)")
    print(f"Elapsed: {elapsed:.2f}s")
    print(f"Peak memory: {_peak_memory_mb():.1f} MB")


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()

    started = time.perf_counter()
    try:
        with SessionLocal() as db:
            orchestrator = build_orchestrator(db, batch_size=args.batch_size)
            result = orchestrator.run(args.target, args.path, args.format)
    except BatchWriteError as exc:
        print(f"Import failed: {exc}", file=sys.stderr)
        if exc.result is not None:
            _print_summary(exc.result, time.perf_counter() - started)
        return 1
    except FeedImportError as exc:
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1
    except RuntimeError as exc:
        logger.error("Import could not start: %s", exc)
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1

    _print_summary(result, time.perf_counter() - started)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
