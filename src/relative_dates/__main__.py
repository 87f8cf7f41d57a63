"""Command line entry point.

  relative-dates format INSTANT [--format LEVEL] [--not-after SECONDS] [--now INSTANT]
      Print how long ago INSTANT was. Exits 1 when no relative date applies
      (unparseable, future, or older than --not-after).

  relative-dates watch INSTANT [INSTANT ...]
      Show the instants in a live-updating terminal view.

Defaults come from the RELATIVE_DATES_* environment variables.
"""
from __future__ import annotations

import argparse
import logging
import sys

from .config import ConfigError, SyncConfig, load_config
from .formatter import make_relative_date
from .models import FormatLevel
from .utils.time import parse_epoch_ms

logger = logging.getLogger(__name__)

# Shorter digit strings are ISO basic dates such as 20120805
MIN_EPOCH_DIGITS = 10


def _instant_arg(raw: str) -> int | str:
    """Ten or more digits are epoch milliseconds; anything else is treated as ISO-8601."""
    digits = raw.strip().lstrip("-")
    if not digits.isdigit() or len(digits) < MIN_EPOCH_DIGITS:
        return raw
    epoch_ms = parse_epoch_ms(raw)
    return raw if epoch_ms is None else epoch_ms


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relative-dates",
        description="Describe how long ago an instant was",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    fmt = sub.add_parser("format", help="Print the relative date for one instant")
    fmt.add_argument("instant", type=_instant_arg, help="Epoch milliseconds or ISO-8601 timestamp")
    fmt.add_argument(
        "--format",
        choices=[level.value for level in FormatLevel],
        default=None,
        help="Verbosity (default: RELATIVE_DATES_FORMAT or standard)",
    )
    fmt.add_argument("--not-after", type=float, default=None, help="Give up on instants older than this many seconds")
    fmt.add_argument("--now", type=_instant_arg, default=None, help="Reference time instead of the clock")

    watch = sub.add_parser("watch", help="Show live-updating relative dates")
    watch.add_argument("instants", nargs="+", help="ISO-8601 timestamps")

    return parser


def _run_format(args: argparse.Namespace, config: SyncConfig) -> int:
    overrides: dict[str, object] = {}
    if args.format is not None:
        overrides["format"] = FormatLevel(args.format)
    if args.not_after is not None:
        overrides["not_after"] = args.not_after
    config = config.model_copy(update=overrides)

    result = make_relative_date(args.instant, config.options(), now=args.now, tz=config.timezone)
    if result is None:
        print(f"relative-dates: no relative date for {args.instant!r}", file=sys.stderr)
        return 1
    print(result)
    return 0


def _run_watch(args: argparse.Namespace, config: SyncConfig) -> int:  # pragma: no cover (interactive)
    from .app import TimestampApp, TimestampEntry

    TimestampApp([TimestampEntry(instant) for instant in args.instants], config=config).run()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config()
    except ConfigError as exc:
        print(f"relative-dates: {exc}", file=sys.stderr)
        return 2

    if args.command == "format":
        return _run_format(args, config)
    return _run_watch(args, config)


if __name__ == "__main__":
    sys.exit(main())
