"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

from placesync.contracts.config import SourceFormat
from placesync.contracts.place import PlaceCategory

_CONFIG_DEFAULT = "./placesync.json"
_CATEGORIES = [category.value for category in PlaceCategory]


def _package_version() -> str:
    try:
        return version("placesync")
    except PackageNotFoundError:
        return "0.0.0"


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=_CONFIG_DEFAULT, help="Path to placesync.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="placesync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Generate a placesync.json config file")
    init_parser.add_argument(
        "--output",
        "-o",
        default="placesync.json",
        help="Output file path (default: placesync.json)",
    )
    init_parser.add_argument("--defaults", action="store_true", help="Use defaults without prompting")

    sync_parser = subparsers.add_parser("sync", help="Pull places from configured sources")
    _add_common(sync_parser)
    target = sync_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--source", help="Source id to sync")
    target.add_argument("--all", action="store_true", help="Sync every configured source in order")

    test_parser = subparsers.add_parser("test", help="Check that a source can be fetched")
    _add_common(test_parser)
    test_parser.add_argument("--source", required=True, help="Source id to test")

    status_parser = subparsers.add_parser("status", help="Show sync status and history")
    _add_common(status_parser)
    status_parser.add_argument("--source", default=None, help="Only show this source")
    status_parser.add_argument("--clear", action="store_true", help="Clear the history of --source")

    places_parser = subparsers.add_parser("places", help="Browse and edit places")
    places_subparsers = places_parser.add_subparsers(dest="places_command", required=True)

    list_parser = places_subparsers.add_parser("list", help="List effective places")
    _add_common(list_parser)
    list_parser.add_argument("--category", choices=_CATEGORIES, default=None)
    list_parser.add_argument("--city", default=None)
    list_parser.add_argument("--source", default=None, help="Only places from this source")
    list_parser.add_argument("--search", default=None, help="Case-insensitive name/description search")
    list_parser.add_argument("--near", default=None, metavar="LAT,LON", help="Only places near a point")
    list_parser.add_argument("--radius", type=float, default=1.0, help="Radius in km for --near (default: 1)")

    add_parser = places_subparsers.add_parser("add", help="Add a place by hand")
    _add_common(add_parser)
    add_parser.add_argument("--name", required=True)
    add_parser.add_argument("--category", choices=_CATEGORIES, required=True)
    add_parser.add_argument("--city", required=True)
    add_parser.add_argument("--lat", type=float, default=None)
    add_parser.add_argument("--lon", type=float, default=None)
    add_parser.add_argument("--description", default=None)

    edit_parser = places_subparsers.add_parser("edit", help="Edit a place's name, category or description")
    _add_common(edit_parser)
    edit_parser.add_argument("place_id", help="Current id of the place")
    edit_parser.add_argument("--name", default=None)
    edit_parser.add_argument("--category", choices=_CATEGORIES, default=None)
    edit_parser.add_argument("--description", default=None)

    stats_parser = places_subparsers.add_parser("stats", help="Summarise places and edits")
    _add_common(stats_parser)

    edits_parser = subparsers.add_parser("edits", help="Export or import user edits")
    edits_subparsers = edits_parser.add_subparsers(dest="edits_command", required=True)

    export_parser = edits_subparsers.add_parser("export", help="Write user edits as JSON")
    _add_common(export_parser)
    export_parser.add_argument("--output", "-o", default=None, help="Output file (default: stdout)")

    import_parser = edits_subparsers.add_parser("import", help="Merge user edits from an export file")
    _add_common(import_parser)
    import_parser.add_argument("path", help="Path to an edit export")

    parse_parser = subparsers.add_parser("parse", help="Parse a feed file without touching the store")
    parse_parser.add_argument("path", help="Path to a KML or list export")
    parse_parser.add_argument(
        "--format",
        choices=[source_format.value for source_format in SourceFormat],
        default=SourceFormat.AUTO.value,
    )
    parse_parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser


__all__ = ["build_parser"]
