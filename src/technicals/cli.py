"""Command-line interface for the indicator batch."""

from __future__ import annotations

import argparse
import sys

from technicals.config import Settings, parse_symbols
from technicals.errors import ConfigError
from technicals.runtime import run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Calculate technical indicators for stored instrument records"
    )
    parser.add_argument("--data-dir", type=str, help="Directory of <SYMBOL>.json records")
    parser.add_argument("--symbols", type=str, help="Comma-separated symbols to process")
    parser.add_argument("--workers", type=int, help="Records processed concurrently")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level",
    )
    parser.add_argument("--events-dir", type=str, help="Run events output directory")
    parser.add_argument(
        "--import-csv",
        type=str,
        metavar="DIR",
        help="Build records from <SYMBOL>.csv files before calculating",
    )
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Fetch daily history from Yahoo Finance for --symbols before calculating",
    )
    parser.add_argument("--yahoo-suffix", type=str, help="Exchange suffix, e.g. .JK")
    parser.add_argument("--yahoo-range", type=str, help="History period, e.g. 90d or 1y")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.symbols:
        overrides["symbols"] = parse_symbols(args.symbols, settings.symbols)
    if args.workers is not None:
        overrides["workers"] = args.workers
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.events_dir:
        overrides["events_dir"] = args.events_dir
    if args.import_csv:
        overrides["csv_dir"] = args.import_csv
    if args.fetch:
        overrides["fetch"] = True
    if args.yahoo_suffix is not None:
        overrides["yahoo_suffix"] = args.yahoo_suffix.strip()
    if args.yahoo_range:
        overrides["yahoo_range"] = args.yahoo_range.strip()
    return settings.with_overrides(**overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}")
        return 2
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
