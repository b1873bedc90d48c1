"""Feed parsing: raw map exports to canonical places."""

from placesync.feeds.categorize import build_place, categorize, detect_city, generate_place_id, haversine_km
from placesync.feeds.kml import KmlFeedParser
from placesync.feeds.maps_list import MapsListFeedParser
from placesync.feeds.parser import (
    FeedParser,
    classify_payload,
    classify_url,
    extract_list_id_from_url,
    extract_map_id_from_url,
)

__all__ = [
    "FeedParser",
    "KmlFeedParser",
    "MapsListFeedParser",
    "build_place",
    "categorize",
    "classify_payload",
    "classify_url",
    "detect_city",
    "extract_list_id_from_url",
    "extract_map_id_from_url",
    "generate_place_id",
    "haversine_km",
]
