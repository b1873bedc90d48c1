"""Offline feed inspection command."""

from __future__ import annotations

import argparse
from pathlib import Path

from placesync import FeedParser, SourceFormat
from placesync.cli.common import format_counts, format_place_line, plural
from placesync.feeds import classify_payload


def run_parse(args: argparse.Namespace) -> int:
    import placesync.cli as cli

    path = Path(args.path)
    try:
        payload = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise cli.ConfigError(f"failed reading feed file: {path}") from exc

    source_format = SourceFormat(args.format)
    resolved = classify_payload(payload) if source_format == SourceFormat.AUTO else source_format
    places = FeedParser().parse(payload, resolved)

    categories: dict[str, int] = {}
    for place in places:
        categories[place.category.value] = categories.get(place.category.value, 0) + 1

    for place in places:
        print(format_place_line(place))
    print(f"\n{plural(len(places), 'place')} parsed as {resolved.value} ({format_counts(categories)})")
    return 0


__all__ = ["run_parse"]
