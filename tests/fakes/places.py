"""Place record builders."""

from __future__ import annotations

from placesync.contracts.place import Coordinates, Place, PlaceCategory
from placesync.feeds.categorize import generate_place_id


def make_place(
    name: str,
    *,
    category: PlaceCategory = PlaceCategory.ENTERTAINMENT,
    city: str = "Tokyo",
    lat: float = 35.68,
    lon: float = 139.76,
    description: str | None = None,
) -> Place:
    return Place(
        id=generate_place_id(name),
        name=name,
        category=category,
        city=city,
        coordinates=Coordinates(latitude=lat, longitude=lon),
        description=description,
    )
