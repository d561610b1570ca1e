"""Command Line Interface for the movie harvester.

Commands:
    run           Harvest every movie listed in the identifier file.
    check-config  Print the effective (masked) configuration.

Exit codes: 0 on a completed drain, 1 on fatal startup errors or when the
final flush timed out, 130 when interrupted before the pipeline started or a
second time while it was draining. A single Ctrl-C during a run cancels the
remaining movies and still prints the summary.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from movie_harvester.etl.extractors import MovieIdFileError, read_movie_ids
from movie_harvester.etl.extractors.tmdb import RateLimiter, TMDBClient, TMDBNormalizer
from movie_harvester.etl.loaders import JSONBatchWriter
from movie_harvester.etl.pipeline import HarvestPipeline
from movie_harvester.etl.types import HarvestResult
from movie_harvester.etl.utils import configure_logging
from movie_harvester.settings import PipelineSettings, Settings, get_masked_settings, get_settings


class FatalStartupError(Exception):
    """Raised for configuration or input problems that prevent any work."""

    pass


# =============================================================================
# ARGUMENT PARSING
# =============================================================================


def _parse_cli_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="movie-harvester",
        description="Bulk TMDB movie harvester",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m movie_harvester run --ids-file movie_ids.json
  python -m movie_harvester run --workers 100 --batch-size 500
  python -m movie_harvester check-config
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    run_parser = subparsers.add_parser("run", help="Harvest movies")
    run_parser.add_argument("--ids-file", type=Path, help="JSON array of {\"id\": <int>}")
    run_parser.add_argument("--workers", type=int, help="Concurrent fetch workers")
    run_parser.add_argument("--batch-size", type=int, help="Movies per batch file")
    run_parser.add_argument("--flush-timeout", type=float, help="Seconds before a partial flush")
    run_parser.add_argument("--output-dir", type=Path, help="Directory for batch files")
    run_parser.add_argument("--no-log-file", action="store_true", help="Log to stdout only")

    subparsers.add_parser("check-config", help="Print masked configuration")

    return parser.parse_args(argv)


# =============================================================================
# SETUP
# =============================================================================


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        raise FatalStartupError(f"Invalid configuration: {e}") from e


def _apply_overrides(pipeline: PipelineSettings, args: argparse.Namespace) -> PipelineSettings:
    """Return pipeline settings with CLI flags applied and re-validated."""
    overrides: dict[str, Any] = {
        name: value
        for name, value in (
            ("ids_file", args.ids_file),
            ("workers", args.workers),
            ("batch_size", args.batch_size),
            ("flush_timeout", args.flush_timeout),
            ("output_dir", args.output_dir),
        )
        if value is not None
    }
    if not overrides:
        return pipeline
    try:
        return PipelineSettings(**{**pipeline.model_dump(), **overrides})
    except ValidationError as e:
        raise FatalStartupError(f"Invalid option: {e}") from e


# =============================================================================
# COMMAND HANDLERS
# =============================================================================


def _handle_run(args: argparse.Namespace) -> int:
    settings = _load_settings()
    pipeline_settings = _apply_overrides(settings.pipeline, args)
    logger = configure_logging(settings.logging, to_file=not args.no_log_file)

    if not settings.tmdb.is_configured:
        raise FatalStartupError("TMDB_ACCESS_TOKEN is not set")

    try:
        movie_ids = read_movie_ids(pipeline_settings.ids_file)
    except MovieIdFileError as e:
        raise FatalStartupError(str(e)) from e

    limiter = RateLimiter(settings.tmdb.requests_per_second, settings.tmdb.burst)
    writer = JSONBatchWriter(pipeline_settings.output_dir, pipeline_settings.file_prefix)

    with TMDBClient(settings.tmdb, max_connections=pipeline_settings.workers) as client:
        pipeline = HarvestPipeline(client, TMDBNormalizer(), writer, limiter, pipeline_settings)
        result = pipeline.run(movie_ids)

    _print_summary(result)
    if not result["success"]:
        logger.error("Harvest did not drain cleanly")
        return 1
    logger.info("Successfully processed and saved movie data")
    return 0


def _handle_check_config() -> int:
    settings = _load_settings()
    print(json.dumps(get_masked_settings(settings), indent=2))
    status = "configured" if settings.tmdb.is_configured else "MISSING"
    print(f"\nTMDB access token: {status}")
    return 0 if settings.tmdb.is_configured else 1


def _print_summary(result: HarvestResult) -> None:
    print("\n" + "=" * 60)
    print("HARVEST SUMMARY")
    print("=" * 60)
    for key in ("queued", "fetched", "normalized", "written", "dropped", "batches"):
        print(f"  {key:<12} {result[key]}")
    for category, count in sorted(result["failures"].items()):
        print(f"  failed/{category:<20} {count}")
    print(f"  duration     {result['duration_seconds']:.2f}s")
    print("=" * 60)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Process exit code.
    """
    args = _parse_cli_arguments(argv)
    if not args.command:
        print("usage: movie-harvester {run,check-config} [options]", file=sys.stderr)
        return 1

    try:
        if args.command == "run":
            return _handle_run(args)
        return _handle_check_config()
    except FatalStartupError as e:
        print(f"\nFATAL: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
