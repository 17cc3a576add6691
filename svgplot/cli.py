from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import re
import sys
from typing import Any, TextIO

from svgplot.config import PlotConfig, load_config
from svgplot.errors import PlotDataError, PlotError
from svgplot.histogram import AutomaticBinningRule, BinningMode, generate_bins
from svgplot.labeling import LabelingAlgorithm, LabelingOptions, generate_ticks


LOGGER = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s,]+")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper()), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = PlotConfig()
        if args.config is not None:
            config = load_config(args.config)
            LOGGER.debug("loaded config from %s", args.config)
        if args.command == "ticks":
            payload = _run_ticks(args, config)
        elif args.command == "bins":
            payload = _run_bins(args)
        else:
            raise RuntimeError(f"unsupported command: {args.command}")
    except (PlotError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="svgplot", description="Nice axis ticks and histogram bins.")
    parser.add_argument("--config", type=Path, default=None, help="TOML config supplying axis defaults.")
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"], default="warning")
    sub = parser.add_subparsers(dest="command", required=True)

    ticks = sub.add_parser("ticks", help="Compute nice axis bounds, tick positions and labels for a range.")
    ticks.add_argument("data_min", type=float)
    ticks.add_argument("data_max", type=float)
    ticks.add_argument("--algorithm", choices=[a.value for a in LabelingAlgorithm], default=None)
    ticks.add_argument("--tick-count", type=int, default=None, help="Desired tick count hint (min 2).")
    ticks.add_argument("--format", dest="format_string", default=None, help="Label format, e.g. G3 or .2f.")
    ticks.add_argument("--axis-length", type=float, default=500.0, help="Physical axis length in pixels.")

    bins = sub.add_parser("bins", help="Bin whitespace/comma separated samples read from a file or stdin.")
    bins.add_argument("source", help="Path to a file of numbers, or - for stdin.")
    bins.add_argument("--mode", choices=[m.value for m in BinningMode], default=BinningMode.AUTOMATIC.value)
    bins.add_argument("--count", type=int, default=None, help="Bin count for manual_count mode.")
    bins.add_argument("--width", type=float, default=None, help="Bin width for manual_width mode.")
    bins.add_argument(
        "--rule",
        choices=[r.value for r in AutomaticBinningRule],
        default=AutomaticBinningRule.FREEDMAN_DIACONIS.value,
    )
    return parser


def _run_ticks(args: argparse.Namespace, config: PlotConfig) -> dict[str, Any]:
    algorithm = args.algorithm or config.algorithm
    options = LabelingOptions(
        tick_count=args.tick_count if args.tick_count is not None else config.tick_count,
        format_string=args.format_string or config.format_string,
        font_size=config.font_size,
    )
    result = generate_ticks(algorithm, args.data_min, args.data_max, args.axis_length, options)
    if result is None:
        raise PlotError(f"no ticks produced for range [{args.data_min}, {args.data_max}]")
    return {
        "positions": list(result.positions),
        "labels": list(result.labels),
        "actual_min": result.actual_min,
        "actual_max": result.actual_max,
    }


def _run_bins(args: argparse.Namespace) -> dict[str, Any]:
    if args.source == "-":
        samples = read_samples(sys.stdin)
    else:
        with Path(args.source).open("r", encoding="utf-8") as f:
            samples = read_samples(f)
    bins = generate_bins(
        samples,
        args.mode,
        manual_bin_count=args.count,
        manual_bin_width=args.width,
        auto_rule=args.rule,
    )
    return {
        "sample_count": len(samples),
        "bins": [{"lower": b.lower_bound, "upper": b.upper_bound, "count": b.count} for b in bins],
    }


def read_samples(stream: TextIO) -> list[float]:
    samples: list[float] = []
    for line_no, line in enumerate(stream, start=1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        for token in _SEPARATORS.split(line):
            if not token:
                continue
            try:
                samples.append(float(token))
            except ValueError as exc:
                raise PlotDataError(f"line {line_no}: not a number: {token!r}") from exc
    return samples


if __name__ == "__main__":
    raise SystemExit(main())
