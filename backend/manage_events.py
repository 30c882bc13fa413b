#!/usr/bin/env python3
"""
CLI tool for operating the event cache.

Usage:
    python manage_events.py import-snapshot scraper-results.json
    python manage_events.py refresh --state California
    python manage_events.py status
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from app.core.container import get_service_container
from app.core.env import load_environment
from app.core.logging import configure_logging
from app.services.events import Location, RawScraperRecord


def _location(args, settings) -> Location:
    latitude = args.latitude if args.latitude is not None else settings.default_latitude
    longitude = args.longitude if args.longitude is not None else settings.default_longitude
    return Location(latitude, longitude)


def _print_summary(document):
    summary = document.summary
    print("=" * 60)
    print(f"Total events:      {summary.total_events}")
    print(f"From scraper:      {summary.from_scraper}")
    print(f"From locator:      {summary.from_third_party}")
    print(f"Unique stores:     {summary.unique_stores}")
    print(f"Last updated:      {document.last_updated.isoformat()}")
    print("=" * 60)


def refresh(args, records=None):
    """Rebuild the combined cache, optionally with a new scraper batch."""
    container = get_service_container()
    settings = container.settings
    document = asyncio.run(
        container.aggregation_service.refresh(
            _location(args, settings),
            args.radius or settings.default_radius_miles,
            args.state or settings.default_region,
            scraper_records=records,
        )
    )
    _print_summary(document)


def import_snapshot(args):
    """Load a scraper results file and rebuild the cache from it."""
    path = Path(args.file)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        print(f"❌ Unable to read {path}: {exc}")
        sys.exit(1)

    items = data if isinstance(data, list) else data.get("events", [])
    records = [RawScraperRecord.from_dict(item) for item in items if isinstance(item, dict)]
    print(f"Importing {len(records)} scraper records from {path}")

    if args.no_refresh:
        if not get_service_container().snapshot_store.write(records):
            print("❌ Snapshot write failed!")
            sys.exit(1)
        print("✅ Snapshot saved (cache not rebuilt)")
        return

    refresh(args, records)


def status(args):
    """Show cache and snapshot state."""
    container = get_service_container()
    document = container.cache_store.read()
    if document is None:
        print("No combined cache has been written yet.")
        return

    _print_summary(document)
    print(f"Cache valid:       {container.cache_store.is_valid()}")
    last_run = document.last_scraper_run.isoformat() if document.last_scraper_run else "never"
    print(f"Last scraper run:  {last_run}")
    print(f"Scraper fresh:     {container.aggregation_service.scraper_data_fresh()}")


def _add_location_arguments(parser):
    parser.add_argument("--latitude", type=float, default=None, help="Origin latitude")
    parser.add_argument("--longitude", type=float, default=None, help="Origin longitude")
    parser.add_argument("--radius", type=float, default=None, help="Radius in miles")
    parser.add_argument("--state", default=None, help="Region/state name")


def main():
    parser = argparse.ArgumentParser(
        description="Manage the TCG event cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Upload a scraper batch and rebuild
  python manage_events.py import-snapshot scraper-results.json

  # Rebuild around a different origin
  python manage_events.py refresh --latitude 34.05 --longitude -118.24 --state California

  # Inspect the cache
  python manage_events.py status
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    import_parser = subparsers.add_parser("import-snapshot", help="Store a scraper batch")
    import_parser.add_argument("file", help="JSON file with an events array")
    import_parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Only store the snapshot; do not rebuild the cache",
    )
    _add_location_arguments(import_parser)

    refresh_parser = subparsers.add_parser("refresh", help="Rebuild the combined cache")
    _add_location_arguments(refresh_parser)

    subparsers.add_parser("status", help="Show cache status")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    load_environment()
    configure_logging()

    if args.command == "import-snapshot":
        import_snapshot(args)
    elif args.command == "refresh":
        refresh(args)
    elif args.command == "status":
        status(args)


if __name__ == "__main__":
    main()
