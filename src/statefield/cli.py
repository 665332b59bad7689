"""
Command-line interface for state tracking.

Usage:
    statefield Energy=4 Chaos_Load=2      # set axes and record
    statefield Focus+ Money-              # step axes by one and record
    statefield                            # show the last recorded state
"""

import argparse
import json
import logging
import re
import sys
from pathlib import Path

from statefield.core.dimensions import DIMENSION_KEYS, StateVector, get_dimension
from statefield.core.mapper import DEFAULT_POLICY, POLICIES
from statefield.pipeline import PipelineConfig, StatePipeline

_SETTING = re.compile(r"^(?P<key>[A-Za-z_]+)(?:=(?P<value>.*)|(?P<step>[+-]))$")


def parse_setting(text: str) -> tuple[str, str, str]:
    """
    Split ``Key=Value``, ``Key+`` or ``Key-``.

    Returns:
        (key, kind, operand) where kind is "set" or "step".

    Raises:
        ValueError: On malformed text or an unknown dimension key.
    """
    match = _SETTING.match(text)
    if match is None:
        raise ValueError(f"Cannot parse setting {text!r} (use Key=N, Key+ or Key-)")
    key = match.group("key")
    try:
        get_dimension(key)
    except KeyError as e:
        raise ValueError(e.args[0]) from None
    if match.group("step") is not None:
        return key, "step", match.group("step")
    return key, "set", match.group("value")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statefield",
        description="Record a 12-axis self-report and derive field parameters",
        epilog="Dimensions: " + ", ".join(DIMENSION_KEYS),
    )

    parser.add_argument(
        "settings",
        nargs="*",
        help="Axis updates: Key=N (0-5), Key+ or Key-",
    )

    parser.add_argument(
        "--history",
        type=Path,
        default=None,
        help="History file (default: ~/.statefield/history.json)",
    )

    parser.add_argument(
        "-p", "--policy",
        choices=sorted(POLICIES),
        default=DEFAULT_POLICY,
        help=f"Parameter mapping policy (default: {DEFAULT_POLICY})",
    )

    parser.add_argument(
        "--window-hours",
        type=float,
        default=24.0,
        help="Jitter look-back window in hours (default: 24)",
    )

    parser.add_argument(
        "--retention",
        type=int,
        default=500,
        help="Maximum samples kept in history (default: 500)",
    )

    parser.add_argument(
        "--precision",
        type=int,
        default=3,
        help="Decimal places for displayed parameters (default: 3)",
    )

    parser.add_argument(
        "--no-clamp",
        action="store_true",
        help="Let the coherence policy report D above its ceiling",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the JSON report to this path",
    )

    parser.add_argument(
        "--payload",
        action="store_true",
        help="Write the analysis payload (full history + params) instead of the report",
    )

    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear the history before applying settings",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print the report as JSON to stdout",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = [parse_setting(s) for s in args.settings]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.retention < 1:
        print(f"Error: --retention must be positive, got {args.retention}", file=sys.stderr)
        return 1

    if args.precision < 0:
        print(f"Error: --precision must not be negative, got {args.precision}", file=sys.stderr)
        return 1

    config = PipelineConfig(
        policy=args.policy,
        window_hours=args.window_hours,
        retention=args.retention,
        precision=args.precision,
        clamp_diffusion=not args.no_clamp,
        history_path=args.history,
        persist=True,
    )
    pipeline = StatePipeline(config=config)

    if args.reset:
        pipeline.store.clear()
        if not args.quiet:
            print("History cleared")

    if settings:
        state = pipeline.current_state()
        for key, kind, operand in settings:
            if kind == "step":
                state = state.adjust(key, 1 if operand == "+" else -1)
            else:
                values = state.to_dict()
                values[key] = operand
                state = StateVector(values)
        result = pipeline.record(state)
    else:
        result = pipeline.restore()

    if not result:
        if not args.quiet:
            print("No history yet. Record a state, e.g.: statefield Energy=3 Focus=4")
        return 0

    report = result["report"]
    if not args.quiet:
        display = report["display"]
        print(display["state_vector"])
        print(display["feedback"])
        print(display["equation"])
        print()
        print(result["verdict"].text)

    if args.output is not None:
        written = pipeline.export(args.output, payload=args.payload)
        if not args.quiet:
            print(f"Output: {written}")

    if args.summary:
        print(json.dumps(report, indent=2, ensure_ascii=False))

    return 0


if __name__ == "__main__":
    sys.exit(main())
