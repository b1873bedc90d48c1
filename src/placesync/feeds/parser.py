"""Feed format selection and dispatch."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Protocol

from placesync.contracts.config import DEFAULT_CITIES, DEFAULT_REGION, CityBounds, SourceFormat
from placesync.contracts.exceptions import ConfigError
from placesync.contracts.place import Place
from placesync.feeds.kml import KmlFeedParser
from placesync.feeds.maps_list import GUARD_PREFIX, MapsListFeedParser

_MAP_ID_RE = re.compile(r"[?&]mid=([A-Za-z0-9_-]+)")
_LIST_ID_RE = re.compile(r"[!&]1s([A-Za-z0-9_-]+)")


class _FormatParser(Protocol):
    def parse(self, payload: str) -> list[Place]: ...


def classify_payload(payload: str) -> SourceFormat:
    """Pick the concrete format of a raw payload.

    Guarded JSON is recognised by its prefix and XML by its ``<kml`` root.
    Anything else is handed to the KML parser, which rejects it with a
    :class:`~placesync.contracts.exceptions.FormatError`.
    """
    text = (payload or "").lstrip()
    if text.startswith(GUARD_PREFIX):
        return SourceFormat.MAPS_LIST
    return SourceFormat.KML


def classify_url(url: str) -> SourceFormat:
    if _MAP_ID_RE.search(url):
        return SourceFormat.KML
    if _LIST_ID_RE.search(url):
        return SourceFormat.MAPS_LIST
    raise ConfigError(f"Unrecognised map URL: {url}")


def extract_map_id_from_url(url: str) -> str:
    match = _MAP_ID_RE.search(url)
    if match is None:
        raise ConfigError("Invalid My Maps URL - no map ID found")
    return match.group(1)


def extract_list_id_from_url(url: str) -> str:
    match = _LIST_ID_RE.search(url)
    if match is None:
        raise ConfigError("Invalid Google Maps List URL - no list ID found")
    return match.group(1)


class FeedParser:
    """Turns raw feed payloads into canonical places, one parser per format."""

    def __init__(
        self,
        *,
        cities: Sequence[CityBounds] = DEFAULT_CITIES,
        region: CityBounds | None = DEFAULT_REGION,
    ) -> None:
        self._parsers: dict[SourceFormat, _FormatParser] = {
            SourceFormat.KML: KmlFeedParser(cities=cities, region=region),
            SourceFormat.MAPS_LIST: MapsListFeedParser(cities=cities, region=region),
        }

    def parse(self, payload: str, source_format: SourceFormat = SourceFormat.AUTO) -> list[Place]:
        """Parse *payload* as *source_format*.

        Raises:
            FormatError: If the payload lacks the structure of the format.
        """
        resolved = classify_payload(payload) if source_format == SourceFormat.AUTO else source_format
        return self._parsers[resolved].parse(payload)
