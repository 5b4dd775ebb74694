"""
Command line entry point: filter a TIFF volume and write the result.

Example:
    volfilter-run stack.ome.tif maxima.ome.tif --radius 2 2 1 --filter local_max
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from .core.config import Config
from .core.utils import configure_logging
from .data_processing.volume_io import load_volume, save_volume
from .filtering.engine import run
from .filtering.scheduler import create_pool
from .filtering.strategies import available_strategies

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INTERRUPTED = 1
EXIT_INVALID = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="volfilter-run",
        description="Apply a neighborhood selection filter to a 5D TIFF volume.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input", type=Path, help="Input .tif/.tiff file")
    parser.add_argument("output", type=Path, help="Output OME-TIFF file")
    parser.add_argument(
        "--config",
        metavar="FILE",
        type=Path,
        help="YAML or JSON config file. Flags given on the command line override it.",
    )
    parser.add_argument(
        "--radius",
        metavar="R",
        type=int,
        nargs="+",
        default=None,
        help="Neighborhood radius in X [Y [Z]] (config default: 1).",
    )
    parser.add_argument(
        "--filter",
        dest="strategy",
        choices=available_strategies(),
        default=None,
        help="Filter strategy (config default: local_max).",
    )
    parser.add_argument("--workers", metavar="N", type=int, default=None, help="Worker threads (default: CPU count).")
    parser.add_argument("--axes", metavar="AXES", default=None, help="Axis order of the input array, e.g. ZCYX.")
    parser.add_argument("--compression", metavar="NAME", default=None, help="TIFF compression, e.g. zlib.")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def _resolve_config(args: argparse.Namespace) -> Config:
    """Merge the optional config file with command line flags."""
    config = Config.load(args.config) if args.config else Config()
    if args.radius is not None:
        config.filter.radius = list(args.radius)
    if args.strategy is not None:
        config.filter.strategy = args.strategy
    if args.workers is not None:
        config.filter.n_workers = args.workers
    if args.axes is not None:
        config.io.input_axes = args.axes
    if args.compression is not None:
        config.io.compression = args.compression
    if args.log_level is not None:
        config.logging.log_level = args.log_level
    config.filter.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = _resolve_config(args)
    except (ValueError, FileNotFoundError) as e:
        parser.print_usage(sys.stderr)
        print(f"volfilter-run: error: {e}", file=sys.stderr)
        return EXIT_INVALID

    configure_logging(config.logging.log_level, config.logging.verbose)

    try:
        volume = load_volume(args.input, config=config.io)
    except (ValueError, TypeError, FileNotFoundError) as e:
        logger.error(f"Cannot load {args.input}: {e}")
        return EXIT_INVALID

    executor = None
    if config.filter.n_workers is not None:
        executor = create_pool(config.filter.n_workers, config.filter.thread_name_prefix)

    t0 = time.perf_counter()
    try:
        result = run(volume, config.filter.radius, config.filter.strategy, executor=executor)
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    if result.interrupted:
        logger.error(
            f"Filter interrupted after {result.planes_completed}/{result.planes_total} planes; "
            f"nothing written"
        )
        return EXIT_INTERRUPTED

    save_volume(result.volume, args.output, compression=config.io.compression)
    logger.info(f"Done in {time.perf_counter() - t0:.2f}s -> {args.output}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
