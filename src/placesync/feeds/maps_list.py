"""Parser for the guarded nested-array list export."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from placesync.contracts.config import DEFAULT_CITIES, DEFAULT_REGION, CityBounds
from placesync.contracts.exceptions import FormatError
from placesync.contracts.place import Place
from placesync.feeds.categorize import build_place

_LOG = logging.getLogger(__name__)

GUARD_PREFIX = ")]}'"
# data[1][9][0] holds the list entries.
_ENTRIES_PATH = (1, 9, 0)
_NAME_SLOT = 0
_COORDINATES_SLOT = 3
_DESCRIPTION_SLOT = 5


class MapsListFeedParser:
    def __init__(
        self,
        *,
        cities: Sequence[CityBounds] = DEFAULT_CITIES,
        region: CityBounds | None = DEFAULT_REGION,
    ) -> None:
        self._cities = tuple(cities)
        self._region = region

    def parse(self, payload: str) -> list[Place]:
        text = (payload or "").lstrip()
        if not text.startswith(GUARD_PREFIX):
            raise FormatError("Invalid list format: missing response guard prefix")

        try:
            envelope: Any = json.loads(text[len(GUARD_PREFIX) :])
        except json.JSONDecodeError as exc:
            raise FormatError(f"Invalid list format: {exc}") from exc

        if not isinstance(envelope, dict) or not isinstance(envelope.get("data"), list):
            raise FormatError("Invalid list format: expected an object with a 'data' array")

        entries = _walk(envelope["data"], _ENTRIES_PATH)
        if not isinstance(entries, list):
            return []

        places: list[Place] = []
        for entry in entries:
            place = self._parse_entry(entry)
            if place is not None:
                places.append(place)
        _LOG.debug("Parsed %d places from list payload", len(places))
        return places

    def _parse_entry(self, entry: Any) -> Place | None:
        if not isinstance(entry, list) or len(entry) <= _COORDINATES_SLOT:
            return None

        name = entry[_NAME_SLOT]
        if not isinstance(name, str) or not name.strip():
            return None

        coordinates = entry[_COORDINATES_SLOT]
        if not isinstance(coordinates, list) or len(coordinates) < 2:
            return None
        longitude, latitude = coordinates[0], coordinates[1]
        if not (_is_number(longitude) and _is_number(latitude)):
            return None

        description = entry[_DESCRIPTION_SLOT] if len(entry) > _DESCRIPTION_SLOT else None
        try:
            return build_place(
                name=name,
                latitude=float(latitude),
                longitude=float(longitude),
                description=description if isinstance(description, str) else None,
                cities=self._cities,
                region=self._region,
            )
        except (ValidationError, OverflowError):
            return None


def _walk(node: Any, path: tuple[int, ...]) -> Any:
    for index in path:
        if not isinstance(node, list) or index >= len(node):
            return None
        node = node[index]
    return node


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)
