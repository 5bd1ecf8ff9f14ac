"""Command-line interface for validating places and building artifacts."""

import argparse
import logging
import sys
from pathlib import Path

from maginhawa.config import Config, get_config, setup_logging
from maginhawa.errors import ArtifactWriteError, CollectionError
from maginhawa.indexing import (
    build_index,
    build_stats,
    load_collection,
    publish_index,
    publish_stats,
    run_index_build,
    run_stats_build,
)
from maginhawa.validation import (
    format_report,
    format_summary_json,
    validate_directory,
    validate_files,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def cmd_validate(args: argparse.Namespace, cfg: Config) -> int:
    """Validate a single place file or a directory of them."""
    target = Path(args.target).resolve()

    if not target.exists():
        print(f"✗ Path does not exist: {target}", file=sys.stderr)
        return EXIT_ERROR

    try:
        if target.is_dir():
            if not args.json:
                print(f"Validating all places in: {target}\n")
            report = validate_directory(target)
        elif target.is_file():
            if not args.json:
                print(f"Validating file: {target}\n")
            report = validate_files([target])
        else:
            print("✗ Target must be a file or directory", file=sys.stderr)
            return EXIT_ERROR
    except CollectionError as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.json:
        print(format_summary_json(report))
    else:
        print(format_report(report))

    return EXIT_OK if report.all_valid else EXIT_INVALID


def _places_dir(args: argparse.Namespace, cfg: Config) -> Path:
    return Path(args.places_dir) if args.places_dir else cfg.places_dir


def cmd_build_index(args: argparse.Namespace, cfg: Config) -> int:
    output = Path(args.output) if args.output else cfg.index_path
    entries = run_index_build(_places_dir(args, cfg), output)
    print(f"✓ Index built: {len(entries)} places -> {output}")
    return EXIT_OK


def cmd_build_stats(args: argparse.Namespace, cfg: Config) -> int:
    output = Path(args.output) if args.output else cfg.stats_path
    stats = run_stats_build(_places_dir(args, cfg), output)
    print("✓ Statistics built successfully!\n")
    print("Summary:")
    print(f"  Places processed: {stats.total_places}")
    print(f"  Unique cuisines: {stats.unique_cuisines}")
    print(f"  Unique amenities: {stats.unique_amenities}")
    print(f"  Unique tags: {stats.unique_tags}")
    print(f"  Price ranges: {', '.join(stats.price_ranges)}")
    print(f"  Output: {output}")
    return EXIT_OK


def cmd_build(args: argparse.Namespace, cfg: Config) -> int:
    """Regenerate the index and then the stats from one read of the records."""
    index_path = Path(args.index_output) if args.index_output else cfg.index_path
    stats_path = Path(args.stats_output) if args.stats_output else cfg.stats_path

    places = load_collection(_places_dir(args, cfg))
    entries = build_index(places)
    stats = build_stats(places)

    publish_index(entries, index_path)
    publish_stats(stats, stats_path)
    print(f"✓ Index built: {len(entries)} places -> {index_path}")
    print(f"✓ Stats built: {stats.unique_cuisines} cuisines -> {stats_path}")
    return EXIT_OK


def cmd_serve(args: argparse.Namespace, cfg: Config) -> int:
    from maginhawa.server import run_server

    run_server(cfg)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maginhawa",
        description="Validate place records and build the published index and stats",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser(
        "validate", help="Validate a place file or a directory of place files"
    )
    validate.add_argument("target", help="Path to a place file or directory")
    validate.add_argument(
        "--json", action="store_true", help="Print a machine-readable JSON summary"
    )
    validate.set_defaults(handler=cmd_validate)

    index_cmd = subparsers.add_parser("build-index", help="Regenerate places.json")
    index_cmd.add_argument("--places-dir", help="Override the places directory")
    index_cmd.add_argument("--output", help="Override the index output path")
    index_cmd.set_defaults(handler=cmd_build_index)

    stats_cmd = subparsers.add_parser("build-stats", help="Regenerate stats.json")
    stats_cmd.add_argument("--places-dir", help="Override the places directory")
    stats_cmd.add_argument("--output", help="Override the stats output path")
    stats_cmd.set_defaults(handler=cmd_build_stats)

    build = subparsers.add_parser("build", help="Regenerate the index, then the stats")
    build.add_argument("--places-dir", help="Override the places directory")
    build.add_argument("--index-output", help="Override the index output path")
    build.add_argument("--stats-output", help="Override the stats output path")
    build.set_defaults(handler=cmd_build)

    serve = subparsers.add_parser("serve", help="Run the submission API server")
    serve.set_defaults(handler=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = get_config()
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    setup_logging(cfg)

    try:
        return args.handler(args, cfg)
    except CollectionError as e:
        logger.error(str(e))
        print(f"\n✗ Build failed: {e}", file=sys.stderr)
        for name, messages in e.failures.items():
            print(f"  ✗ {name}", file=sys.stderr)
            for message in messages:
                print(f"    • {message}", file=sys.stderr)
        return EXIT_ERROR
    except ArtifactWriteError as e:
        logger.error(str(e))
        print(f"\n✗ Build failed: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
