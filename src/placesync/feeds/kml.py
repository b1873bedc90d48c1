"""Parser for XML placemark exports (KML)."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from placesync.contracts.config import DEFAULT_CITIES, DEFAULT_REGION, CityBounds
from placesync.contracts.exceptions import FormatError
from placesync.contracts.place import Place
from placesync.feeds.categorize import build_place

_LOG = logging.getLogger(__name__)


class KmlFeedParser:
    """Extracts one place per ``<Placemark>`` that has a name and a point.

    Markers without geometry are common in exported maps, so placemarks that
    lack a parseable ``lon,lat`` pair are skipped rather than rejected.
    """

    def __init__(
        self,
        *,
        cities: Sequence[CityBounds] = DEFAULT_CITIES,
        region: CityBounds | None = DEFAULT_REGION,
    ) -> None:
        self._cities = tuple(cities)
        self._region = region

    def parse(self, payload: str) -> list[Place]:
        if not payload or "<kml" not in payload:
            raise FormatError("Invalid KML format: no <kml> root element")

        soup = BeautifulSoup(payload, "xml")
        if soup.find("kml") is None:
            raise FormatError("Invalid KML format: no <kml> root element")

        places: list[Place] = []
        for placemark in soup.find_all("Placemark"):
            place = self._parse_placemark(placemark)
            if place is not None:
                places.append(place)
        _LOG.debug("Parsed %d places from KML payload", len(places))
        return places

    def _parse_placemark(self, placemark: Tag) -> Place | None:
        name = _child_text(placemark, "name")
        if not name:
            return None

        point = _parse_coordinates(placemark)
        if point is None:
            _LOG.debug("Skipping placemark without coordinates: %s", name)
            return None

        longitude, latitude = point
        try:
            return build_place(
                name=name,
                latitude=latitude,
                longitude=longitude,
                description=_child_text(placemark, "description"),
                cities=self._cities,
                region=self._region,
            )
        except ValidationError:
            _LOG.debug("Skipping placemark with out-of-range coordinates: %s", name)
            return None


def _child_text(placemark: Tag, tag_name: str) -> str:
    child = placemark.find(tag_name, recursive=False)
    if child is None:
        return ""
    return child.get_text().strip()


def _parse_coordinates(placemark: Tag) -> tuple[float, float] | None:
    node = placemark.find("coordinates")
    if node is None:
        return None
    tuples = node.get_text().split()
    if not tuples:
        return None
    parts = tuples[0].split(",")
    if len(parts) < 2:
        return None
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        return None
