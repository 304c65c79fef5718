"""
torque-grid Command Line
========================

Entry point wrapping loader, engine and greymap writer.

Usage:
    torque-grid render tile.csv > image.pgm
    torque-grid render tile.csv -o image.pgm --workers 8
    torque-grid bench tile.csv --repeats 20 --executor process

Logs (including 'Loaded N rows' and 'Time: Xms') go to stderr so the
image can be piped from stdout.
"""

import argparse
import json
import logging
import sys
import time
from typing import List, Optional

from pydantic import ValidationError

from torque_grid.bench import benchmark
from torque_grid.config import Settings, load_config, setup_logging
from torque_grid.engine import RasterEngine
from torque_grid.errors import TorqueGridError
from torque_grid.io.loader import read_samples
from torque_grid.io.pgm import save_pgm, write_pgm
from torque_grid.parallel.scheduler import ExecutorKind


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="torque-grid",
        description="Bin geotagged samples into a greyscale raster tile",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: search working directory)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override logging.level (DEBUG, INFO, WARNING, ...)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render a greymap tile")
    render.add_argument("input", help="Record file ('amount y x' per line)")
    render.add_argument(
        "-o", "--output",
        default=None,
        help="Output PGM path (default: stdout)",
    )
    render.add_argument(
        "--strict",
        action="store_true",
        help="Fail instead of writing a blank tile when nothing is binned",
    )

    bench = subparsers.add_parser("bench", help="Time repeated aggregation runs")
    bench.add_argument("input", help="Record file ('amount y x' per line)")
    bench.add_argument(
        "--repeats",
        type=int,
        default=10,
        help="Number of runs (default: 10)",
    )

    for sub in (render, bench):
        sub.add_argument(
            "--workers",
            type=int,
            default=None,
            help="Override workers.count",
        )
        sub.add_argument(
            "--executor",
            choices=[kind.value for kind in ExecutorKind],
            default=None,
            help="Override workers.executor",
        )

    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply command line overrides (highest precedence)."""
    data = settings.model_dump()
    if args.workers is not None:
        data["workers"]["count"] = args.workers
    if args.executor is not None:
        data["workers"]["executor"] = args.executor
    if args.log_level is not None:
        data["logging"]["level"] = args.log_level
    return Settings.model_validate(data)


def _run_render(args: argparse.Namespace, settings: Settings) -> None:
    engine = RasterEngine.from_settings(settings)
    samples = read_samples(args.input)

    start_time = time.perf_counter()
    grid = engine.render(samples, strict=args.strict)
    logger.info(f"Time: {int((time.perf_counter() - start_time) * 1000)}ms")

    if args.output:
        save_pgm(grid, args.output, maxval=settings.output.maxval)
    else:
        write_pgm(grid, sys.stdout, maxval=settings.output.maxval)
        sys.stdout.flush()


def _run_bench(args: argparse.Namespace, settings: Settings) -> None:
    engine = RasterEngine.from_settings(settings)
    samples = read_samples(args.input)
    result = benchmark(engine, samples, repeats=args.repeats)
    print(json.dumps(result.to_dict(), indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line tool.

    Returns:
        Process exit status (0 on success)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _apply_overrides(load_config(args.config), args)
    except (ValidationError, OSError, ValueError) as exc:
        print(f"torque-grid: invalid configuration: {exc}", file=sys.stderr)
        return 2

    setup_logging(settings)

    try:
        if args.command == "render":
            _run_render(args, settings)
        else:
            _run_bench(args, settings)
    except (TorqueGridError, ValueError, OSError) as exc:
        logger.error(f"{args.command} failed: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
