"""
Metabase Export - Command Line Interface

This module provides the CLI entry point for the metabase-export package.

Usage:
    # Using .env.metabase configuration file:
    metabase-export dump

    # With command-line arguments:
    metabase-export dump --base-url https://metabase.example.com --api-key KEY

    # Dump a local JSON snapshot instead of a live instance:
    metabase-export dump --snapshot snapshot.json --output-dir my_dump

    # Dump only some entity kinds:
    metabase-export dump --kinds collection dashboard card

    # With debug mode:
    metabase-export dump --debug

Configuration:
    Create a .env.metabase file with:
        BASE_URL=https://metabase.example.com
        API_KEY=your_api_key
        OUTPUT_DIR=output/dump             # Optional
        ENTITY_KINDS=collection,card       # Optional
        MAX_WORKERS=4                      # Optional
        DEBUG=false                        # Optional
"""

import argparse
import logging

from metabase_export.common import configure_logging
from metabase_export.config import ExportConfig
from metabase_export.export import dump_all_entities
from metabase_export.export.writers import YamlWriter
from metabase_export.models import EntityKind
from metabase_export.store import ApiStore, SnapshotStore

logger = logging.getLogger(__name__)


def _create_parser():
    """Create and return the argument parser."""
    parser = argparse.ArgumentParser(
        description="Dump Metabase content to a tree of YAML files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic dump using .env.metabase:
  metabase-export dump

  # Dump a local snapshot:
  metabase-export dump --snapshot snapshot.json

  # Only collections, dashboards and cards, 4 at a time:
  metabase-export dump --kinds collection dashboard card --max-workers 4

  # Debug mode:
  metabase-export dump --debug
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    dump_parser = subparsers.add_parser("dump", help="Dump Metabase content to YAML")
    _add_dump_arguments(dump_parser)

    return parser


def _add_dump_arguments(parser):
    """Add dump-specific arguments to parser."""
    # Connection arguments (override .env.metabase)
    parser.add_argument(
        "--base-url", type=str, help="Metabase base URL (env: BASE_URL)"
    )
    parser.add_argument("--api-key", type=str, help="Metabase API key (env: API_KEY)")
    parser.add_argument(
        "--snapshot",
        type=str,
        help="Read entities from a local JSON snapshot instead of the API",
    )

    # Output configuration
    parser.add_argument(
        "--output-dir",
        type=str,
        help="Root directory of the dumped tree - default: output/dump (env: OUTPUT_DIR)",
    )
    parser.add_argument(
        "--extension",
        type=str,
        help="Extension of written files - default: yaml (env: FILE_EXTENSION)",
    )
    parser.add_argument(
        "--kinds",
        nargs="+",
        choices=[kind.value for kind in EntityKind],
        help="Entity kinds to dump - default: all (env: ENTITY_KINDS)",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Entities dumped in parallel - default: 1 (env: MAX_WORKERS)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging (env: DEBUG)"
    )


def run_dump_command(args):
    """Run dump command."""
    print("=" * 70)
    print("Metabase Content Dump")
    print("=" * 70)

    # Command-line arguments win over .env / .env.metabase values
    config = ExportConfig(
        base_url=args.base_url,
        api_key=args.api_key,
        output_dir=args.output_dir,
        file_extension=args.extension,
        max_workers=args.max_workers,
        entity_kinds=args.kinds,
        debug=True if args.debug else None,
        load_from_env=True,
    )

    if not args.snapshot and (not config.BASE_URL or not config.API_KEY):
        print("\nError: Missing required configuration.")
        print("\nProvide either:")
        print("  - BASE_URL and API_KEY (or --base-url and --api-key)")
        print("  - a local snapshot file (--snapshot)")
        print("\nFor help: metabase-export --help")
        return 1

    configure_logging(debug=config.DEBUG)

    print("\nConfiguration:")
    if args.snapshot:
        print(f"   Snapshot: {args.snapshot}")
    else:
        print(f"   Base URL: {config.BASE_URL}")
    print(f"   Output Directory: {config.OUTPUT_DIR}")
    print(f"   Entity Kinds: {', '.join(kind.value for kind in config.ENTITY_KINDS)}")
    print(f"   Max Workers: {config.MAX_WORKERS}")
    print(f"   Debug Mode: {'Enabled' if config.DEBUG else 'Disabled'}")
    print()

    try:
        if args.snapshot:
            store = SnapshotStore.from_file(args.snapshot)
        else:
            store = ApiStore(config=config)

        result = dump_all_entities(
            store,
            writer=YamlWriter(),
            root_prefix=config.OUTPUT_DIR,
            kinds=config.ENTITY_KINDS,
            max_workers=config.MAX_WORKERS,
            extension=config.FILE_EXTENSION,
        )

        print("\n" + "=" * 70)
        print("Dump Completed Successfully!")
        print("=" * 70)
        print("\nResults:")
        for kind, count in result["counts"].items():
            print(f"   {kind}: {count}")
        print(f"   Files Written: {len(result['written'])}")
        print(f"   Output Directory: {config.OUTPUT_DIR}")
        print("\n" + "=" * 70)
        return 0

    except Exception as e:
        print("\n" + "=" * 70)
        print("Dump Failed!")
        print("=" * 70)
        print(f"\nError: {str(e)}")

        if config.DEBUG:
            logger.exception("Dump failed")
        else:
            print("\nRun with --debug flag for detailed error information.")

        print("\n" + "=" * 70)
        return 1


def main(argv=None):
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
    """
    parser = _create_parser()
    args = parser.parse_args(argv)

    if args.command == "dump":
        return run_dump_command(args)
    parser.print_help()
    return 1
