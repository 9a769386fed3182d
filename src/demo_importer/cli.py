from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import psycopg

from . import __version__
from .config import ConfigurationError, Settings, load_settings
from .constants import MAX_SEASON, MIN_SEASON
from .core import ImportResult, PostgresMatchStore, StatsClient, process_directory

_LOGGER = logging.getLogger(__name__)


def _season(value: str) -> int:
    try:
        season = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid season: {value!r}") from exc
    if not MIN_SEASON <= season <= MAX_SEASON:
        raise argparse.ArgumentTypeError(
            f"season must be between {MIN_SEASON} and {MAX_SEASON}"
        )
    return season


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Submit recorded match demos to the stats service"
    )
    parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        required=True,
        help="Directory containing the demos to import",
    )
    parser.add_argument(
        "-t",
        "--tier",
        help="Tier to use for demos without a match id in the filename",
    )
    parser.add_argument(
        "-s",
        "--season",
        type=_season,
        help="Season to use for demos without a match id and for combine matches",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Read environment variables from this file instead of ./.env",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the root log level",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def _log_path_summary(
    log_fn, label: str, paths: Sequence[Path], *, limit: int = 5
) -> None:
    if not paths:
        return
    sorted_paths = sorted(paths, key=lambda path: str(path).lower())
    log_fn("%s (%s)", label, len(sorted_paths))
    for path in sorted_paths[:limit]:
        log_fn("  %s", path)
    remaining = len(sorted_paths) - limit
    if remaining > 0:
        log_fn("  ... %s more", remaining)


def run(settings: Settings) -> ImportResult:
    """Open the database and HTTP session once and import the directory."""
    client = StatsClient(settings.stats_api_url, timeout=settings.request_timeout)
    try:
        with psycopg.connect(settings.database_url, autocommit=True) as conn:
            store = PostgresMatchStore(conn)
            return process_directory(settings, store, client)
    finally:
        client.close()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(message)s")

    try:
        settings = load_settings(
            args.directory,
            season=args.season,
            tier=args.tier,
            env_file=args.env_file,
        )
    except (ConfigurationError, FileNotFoundError) as exc:
        _LOGGER.error("Configuration error: %s", exc)
        return 1

    try:
        settings.ensure_ready()
    except (FileNotFoundError, NotADirectoryError, OSError) as exc:
        _LOGGER.error("Path validation failed: %s", exc)
        return 1

    _LOGGER.info("demo-importer %s", __version__)
    if settings.overrides.season is not None or settings.overrides.tier is not None:
        _LOGGER.info(
            "Overrides: season=%s, tier=%s",
            settings.overrides.season,
            settings.overrides.tier,
        )

    try:
        result = run(settings)
    except psycopg.Error as exc:
        _LOGGER.error("Could not connect to the database: %s", exc)
        return 1

    _log_path_summary(_LOGGER.info, "Completed", result.completed)
    _log_path_summary(_LOGGER.warning, "Skipped", result.skipped)
    _log_path_summary(
        _LOGGER.error, "Could not be moved, check manually", result.routing_failed
    )

    if result.skipped or result.routing_failed:
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

__all__ = ["main", "parse_args", "run"]
