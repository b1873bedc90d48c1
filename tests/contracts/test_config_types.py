from pathlib import Path

import pytest
from pydantic import ValidationError

from placesync.contracts.config import (
    DEFAULT_CITIES,
    CityBounds,
    PlaceSyncConfig,
    SourceConfig,
    SourceFormat,
)


def test_source_defaults_to_kml() -> None:
    source = SourceConfig(id="pauls-map", name="Paul's Map", fetch_id="map-1")

    assert source.format == SourceFormat.KML
    assert source.owner is None


def test_source_requires_fetch_id() -> None:
    with pytest.raises(ValidationError):
        SourceConfig(id="pauls-map", name="Paul's Map", fetch_id="")


def test_config_rejects_duplicate_source_ids() -> None:
    source = SourceConfig(id="pauls-map", name="Paul's Map", fetch_id="map-1")

    with pytest.raises(ValidationError, match="duplicate source id"):
        PlaceSyncConfig(sources=[source, source])


def test_config_rejects_unknown_fetcher() -> None:
    with pytest.raises(ValidationError, match="fetcher must be one of"):
        PlaceSyncConfig(fetcher="ftp")


def test_config_requires_a_city() -> None:
    with pytest.raises(ValidationError):
        PlaceSyncConfig(cities=[])


def test_config_bounds_history_limit() -> None:
    with pytest.raises(ValidationError):
        PlaceSyncConfig(history_limit=0)


def test_config_defaults() -> None:
    config = PlaceSyncConfig()

    assert config.fetcher == "http"
    assert config.storage_dir == Path(".placesync")
    assert config.history_limit == 50
    assert [city.name for city in config.cities] == [city.name for city in DEFAULT_CITIES]


def test_config_is_frozen() -> None:
    config = PlaceSyncConfig()

    with pytest.raises(ValidationError):
        config.fetcher = "file"  # type: ignore[misc]


def test_get_source(sources: list[SourceConfig]) -> None:
    config = PlaceSyncConfig(sources=sources)

    assert config.get_source("kyoto-list") == sources[1]
    assert config.get_source("missing") is None


def test_city_bounds_validation_and_containment() -> None:
    with pytest.raises(ValidationError):
        CityBounds(name="Backwards", min_latitude=2, max_latitude=1, min_longitude=0, max_longitude=1)

    tokyo = DEFAULT_CITIES[0]
    assert tokyo.contains(35.658, 139.7016)
    assert not tokyo.contains(34.6687, 135.5023)
