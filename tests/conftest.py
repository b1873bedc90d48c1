"""Shared test fixtures for placesync tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from placesync.contracts.config import PlaceSyncConfig, SourceConfig, SourceFormat
from tests.fakes.feeds import kml_document, kml_placemark, list_entry, list_payload


@pytest.fixture
def sample_kml() -> str:
    """Three Japanese placemarks plus one without geometry."""
    return kml_document(
        kml_placemark("Shibuya Station", lat=35.6580, lon=139.7016, description="Meet at the Hachiko exit"),
        kml_placemark("Ichiran Ramen", lat=35.6595, lon=139.7005),
        kml_placemark("Dotonbori", lat=34.6687, lon=135.5023, description="Street food and neon"),
        kml_placemark("Folder note"),
    )


@pytest.fixture
def sensoji_kml() -> str:
    return kml_document(kml_placemark("Sensoji Temple", lat=35.7148, lon=139.7967))


@pytest.fixture
def sample_list_payload() -> str:
    return list_payload(
        [
            list_entry("Kinkaku-ji", lat=35.0394, lon=135.7292, description="Golden pavilion"),
            list_entry("Nishiki Market", lat=35.0050, lon=135.7649),
        ]
    )


@pytest.fixture
def sources() -> list[SourceConfig]:
    return [
        SourceConfig(id="pauls-map", name="Paul's Map", owner="Paul", fetch_id="map-1"),
        SourceConfig(
            id="kyoto-list",
            name="Kyoto List",
            fetch_id="list-1",
            format=SourceFormat.MAPS_LIST,
        ),
    ]


@pytest.fixture
def config(tmp_path: Path, sources: list[SourceConfig]) -> PlaceSyncConfig:
    return PlaceSyncConfig(
        sources=sources,
        storage_dir=tmp_path / "store",
        feeds_dir=tmp_path / "feeds",
        fetcher="file",
    )
