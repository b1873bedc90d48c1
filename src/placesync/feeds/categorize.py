"""Pure helpers shared by the feed parsers: category, city and id inference."""

from __future__ import annotations

import hashlib
import math
import re
from collections.abc import Sequence

from placesync.contracts.config import DEFAULT_CITIES, DEFAULT_REGION, CityBounds
from placesync.contracts.place import Coordinates, Place, PlaceCategory

UNKNOWN_CITY = "Unknown"
EARTH_RADIUS_KM = 6371.0

# Checked in order; the first set with a hit decides the category.
_CATEGORY_KEYWORDS: tuple[tuple[PlaceCategory, tuple[str, ...]], ...] = (
    (PlaceCategory.TRANSPORT, ("station", "airport", "train", "subway", "bus", "terminal", "metro")),
    (
        PlaceCategory.ACCOMMODATION,
        ("hotel", "hostel", "inn", "ryokan", "accommodation", "lodge", "guesthouse"),
    ),
    (
        PlaceCategory.RESTAURANT,
        (
            "restaurant",
            "ramen",
            "sushi",
            "cafe",
            "coffee",
            "bar",
            "food",
            "dining",
            "kitchen",
            "bistro",
            "bakery",
            "izakaya",
            "noodle",
            "grill",
            "eatery",
            "takoyaki",
        ),
    ),
    (
        PlaceCategory.SHOPPING,
        ("store", "market", "mall", "department", "convenience", "souvenir", "shopping", "boutique", "outlet"),
    ),
)

# Keywords match anywhere in the text ("Sushiro", "Bookstore"), except these
# short ones, which must stand alone ("Innsbruck", "Barcelona", "business").
_WHOLE_WORD_KEYWORDS = frozenset({"inn", "bar", "bus"})
# A bare "shop" is shopping unless the text also names food or a workshop.
_NOT_A_SHOP = ("ramen", "sushi", "coffee", "food", "workshop")


def _keyword_pattern(keyword: str) -> str:
    if keyword in _WHOLE_WORD_KEYWORDS:
        return rf"\b{re.escape(keyword)}(?:s|es)?\b"
    return re.escape(keyword)


_CATEGORY_PATTERNS: tuple[tuple[PlaceCategory, re.Pattern[str]], ...] = tuple(
    (category, re.compile("|".join(map(_keyword_pattern, keywords)))) for category, keywords in _CATEGORY_KEYWORDS
)

_NON_SLUG_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def categorize(name: str, description: str | None = "") -> PlaceCategory:
    text = f"{name} {description or ''}".lower()
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(text):
            return category
    if "shop" in text and not any(word in text for word in _NOT_A_SHOP):
        return PlaceCategory.SHOPPING
    return PlaceCategory.ENTERTAINMENT


def detect_city(
    latitude: float,
    longitude: float,
    cities: Sequence[CityBounds] = DEFAULT_CITIES,
    region: CityBounds | None = DEFAULT_REGION,
) -> str:
    """Name the first city whose bounding box contains the point.

    Points outside every city box but inside *region* default to the first
    listed city; anything else is ``"Unknown"``.
    """
    for city in cities:
        if city.contains(latitude, longitude):
            return city.name
    if cities and region is not None and region.contains(latitude, longitude):
        return cities[0].name
    return UNKNOWN_CITY


def generate_place_id(name: str) -> str:
    """Derive the stable slug id of a place from its display name.

    ``"Sensoji Temple"`` becomes ``"sensoji-temple"``. Names with no ASCII
    alphanumerics get a short content hash so the id is never empty.
    """
    cleaned = _NON_SLUG_RE.sub("", name.lower())
    slug = _WHITESPACE_RE.sub("-", cleaned.strip()).strip("-")
    if slug:
        return slug
    digest = hashlib.sha256(name.strip().encode("utf-8")).hexdigest()
    return f"place-{digest[:10]}"


def haversine_km(origin: Coordinates, target: Coordinates) -> float:
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(target.longitude - origin.longitude)
    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def build_place(
    *,
    name: str,
    latitude: float,
    longitude: float,
    description: str | None,
    cities: Sequence[CityBounds] = DEFAULT_CITIES,
    region: CityBounds | None = DEFAULT_REGION,
) -> Place:
    """Assemble a canonical place from one raw feed entry."""
    name = name.strip()
    description = (description or "").strip() or None
    return Place(
        id=generate_place_id(name),
        name=name,
        category=categorize(name, description),
        city=detect_city(latitude, longitude, cities, region),
        coordinates=Coordinates(latitude=latitude, longitude=longitude),
        description=description,
    )
