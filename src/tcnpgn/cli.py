"""Command-line entry point: ``tcnpgn GAME_ID``."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from tcnpgn.codec.clock import TimestampMode
from tcnpgn.config import ExportSettings, configure_logging
from tcnpgn.errors import IllegalMove, MalformedInput, NotFound
from tcnpgn.export.service import PgnExporter
from tcnpgn.export.source import JsonFileGameSource

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_REJECTED = 2

# Problems with the request itself rather than with this program.
_CLIENT_ERRORS = (MalformedInput, IllegalMove, NotFound)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tcnpgn",
        description="Print the PGN of a stored game record.",
    )
    parser.add_argument("game_id", help="identifier of the game (file stem)")
    parser.add_argument(
        "--source",
        type=Path,
        help="directory of <game_id>.json records (default: $TCNPGN_SOURCE_DIR or .)",
    )
    parser.add_argument(
        "--timestamps",
        action="store_true",
        help="annotate every move with its elapsed time",
    )
    parser.add_argument(
        "--line-width",
        type=int,
        help="wrap move text at this column, 0 for a single line",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in TimestampMode],
        help="how the record's clock values are read",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log more (-v info, -vv debug)",
    )
    return parser


def _settings_from_args(args: argparse.Namespace) -> ExportSettings:
    settings = ExportSettings.from_env()
    overrides: dict[str, object] = {}
    if args.line_width is not None:
        overrides["line_width"] = args.line_width
    if args.mode is not None:
        overrides["timestamp_mode"] = TimestampMode(args.mode)
    if args.source is not None:
        overrides["source_dir"] = args.source
    if args.verbose:
        overrides["log_level"] = "DEBUG" if args.verbose > 1 else "INFO"
    return replace(settings, **overrides) if overrides else settings


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = _settings_from_args(args)
    except ValueError as exc:
        print(f"tcnpgn: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_REJECTED
    configure_logging(settings.log_level)

    source = JsonFileGameSource(settings.source_dir or Path.cwd())
    exporter = PgnExporter(source, settings)
    try:
        pgn = exporter.export(args.game_id, include_timestamps=args.timestamps)
    except _CLIENT_ERRORS as exc:
        _LOGGER.info("Rejected game %s: %s", args.game_id, exc)
        print(f"tcnpgn: bad request: {exc}", file=sys.stderr)
        return EXIT_REJECTED
    except Exception:
        _LOGGER.exception("Export of game %s failed", args.game_id)
        print("tcnpgn: internal error", file=sys.stderr)
        return EXIT_FAILURE

    sys.stdout.write(pgn)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
