from __future__ import annotations

import pytest

from placesync.contracts.config import CityBounds, SourceFormat
from placesync.contracts.exceptions import ConfigError, FormatError
from placesync.feeds.parser import (
    FeedParser,
    classify_payload,
    classify_url,
    extract_list_id_from_url,
    extract_map_id_from_url,
)

_MY_MAPS_URL = "https://www.google.com/maps/d/viewer?mid=1o8S4w05Z4gPt7s6mfCoZXT46mOJEtV4&ll=35.6,139.7"
_LIST_URL = "https://www.google.com/maps/@35.6,139.7,12z/data=!4m3!11m2!2sAbC-123_x!3e3!1sLiSt_42"


def test_classify_payload(sample_kml: str, sample_list_payload: str) -> None:
    assert classify_payload(sample_kml) == SourceFormat.KML
    assert classify_payload(sample_list_payload) == SourceFormat.MAPS_LIST
    assert classify_payload("garbage") == SourceFormat.KML


def test_auto_format_dispatches_on_payload(sample_kml: str, sample_list_payload: str) -> None:
    parser = FeedParser()

    assert len(parser.parse(sample_kml)) == 3
    assert len(parser.parse(sample_list_payload)) == 2


def test_explicit_format_is_not_second_guessed(sample_list_payload: str) -> None:
    with pytest.raises(FormatError):
        FeedParser().parse(sample_list_payload, SourceFormat.KML)


def test_unclassifiable_payload_raises_format_error() -> None:
    with pytest.raises(FormatError):
        FeedParser().parse("<html></html>")


def test_parser_uses_configured_cities(sensoji_kml: str) -> None:
    cities = [
        CityBounds(name="Asakusa", min_latitude=35.70, max_latitude=35.72, min_longitude=139.78, max_longitude=139.81)
    ]

    (place,) = FeedParser(cities=cities, region=None).parse(sensoji_kml)

    assert place.city == "Asakusa"


def test_extract_ids_from_share_urls() -> None:
    assert extract_map_id_from_url(_MY_MAPS_URL) == "1o8S4w05Z4gPt7s6mfCoZXT46mOJEtV4"
    assert extract_list_id_from_url(_LIST_URL) == "LiSt_42"
    assert classify_url(_MY_MAPS_URL) == SourceFormat.KML
    assert classify_url(_LIST_URL) == SourceFormat.MAPS_LIST


def test_extract_ids_reject_urls_without_ids() -> None:
    with pytest.raises(ConfigError, match="no map ID"):
        extract_map_id_from_url("https://example.com/maps")
    with pytest.raises(ConfigError, match="no list ID"):
        extract_list_id_from_url("https://example.com/maps")
    with pytest.raises(ConfigError):
        classify_url("https://example.com/maps")
