"""Place browsing and editing commands."""

from __future__ import annotations

import argparse

from placesync import Coordinates, NewPlace, Place, PlaceCategory, PlaceEditFields, PlaceStore
from placesync.cli.common import format_counts, format_place_line, format_timestamp, parse_point, plural
from placesync.feeds import generate_place_id

EXIT_REJECTED = 2


def select_places(store: PlaceStore, args: argparse.Namespace) -> list[tuple[Place, float | None]]:
    """Apply the ``places list`` filters, nearest first when ``--near`` is given."""
    if args.near:
        selected: list[tuple[Place, float | None]] = list(
            store.find_nearby_places(parse_point(args.near), args.radius)
        )
    else:
        selected = [(place, None) for place in store.get_effective_places()]

    if args.source:
        allowed = {place.id for place in store.get_places_by_source(args.source)}
        selected = [pair for pair in selected if pair[0].id in allowed]
    if args.category:
        selected = [pair for pair in selected if pair[0].category == PlaceCategory(args.category)]
    if args.city:
        selected = [pair for pair in selected if pair[0].city.lower() == args.city.lower()]
    if args.search:
        matched = {place.id for place in store.search_places(args.search)}
        selected = [pair for pair in selected if pair[0].id in matched]
    return selected


def format_stats(store: PlaceStore) -> str:
    stats = store.get_statistics()
    edit_stats = store.get_edit_statistics()
    lines = [
        "",
        "placesync - place statistics",
        "",
        f"  Places:     {stats.total}",
        f"  Categories: {format_counts({str(key): value for key, value in stats.by_category.items()})}",
        f"  Cities:     {format_counts(stats.by_city)}",
        "",
        f"  Edits:      {edit_stats.total_edits} ({plural(edit_stats.edited_places, 'place')} edited)",
        f"  Last edit:  {format_timestamp(edit_stats.last_edit_at)}",
        "",
    ]
    return "\n".join(lines)


async def run_places(args: argparse.Namespace) -> int:
    import placesync.cli as cli

    config = cli.load_config(args.config)
    async with cli.PlaceSync.from_config(config) as app:
        store = app.store
        if args.places_command == "list":
            selected = select_places(store, args)
            for place, distance in selected:
                print(format_place_line(place, distance_km=distance))
            print(f"\n{plural(len(selected), 'place')}")
            return 0

        if args.places_command == "add":
            coordinates = None
            if args.lat is not None or args.lon is not None:
                if args.lat is None or args.lon is None:
                    raise cli.ConfigError("--lat and --lon must be given together")
                coordinates = Coordinates(latitude=args.lat, longitude=args.lon)
            new_place = NewPlace(
                name=args.name,
                category=PlaceCategory(args.category),
                city=args.city,
                coordinates=coordinates,
                description=args.description,
            )
            if not await store.add_place(new_place):
                print(f"error: a place named {args.name!r} already exists", file=cli.sys.stderr)
                return EXIT_REJECTED
            print(f"Added {args.name}")
            return 0

        if args.places_command == "edit":
            fields = PlaceEditFields(
                name=args.name,
                category=PlaceCategory(args.category) if args.category else None,
                description=args.description,
            )
            if not fields.updates():
                raise cli.ConfigError("nothing to edit: pass --name, --category or --description")
            if not await store.update_place(args.place_id, fields):
                print(f"error: cannot edit {args.place_id!r} (unknown place or name conflict)", file=cli.sys.stderr)
                return EXIT_REJECTED
            edit = store.get_edit(args.place_id if args.name is None else generate_place_id(args.name))
            version = f" (version {edit.version})" if edit is not None else ""
            print(f"Updated {args.place_id}{version}")
            return 0

        print(format_stats(store))
        return 0


__all__ = ["format_stats", "run_places", "select_places"]
