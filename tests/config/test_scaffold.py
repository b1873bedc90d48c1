"""Tests for config scaffolding used by ``placesync init``."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from placesync.config.scaffold import (
    DEFAULT_SOURCES,
    scaffold_config,
    source_from_url,
    source_id_from_name,
    write_config,
)
from placesync.contracts.exceptions import ConfigError

MY_MAPS_URL = "https://www.google.com/maps/d/viewer?mid=1o8S4w05Z4gPt7s6mfCoZXT46mOJEtV4&ll=35.6,139.7"
LIST_URL = "https://www.google.com/maps/@35.0,135.7,12z/data=!4m3!11m2!2sabc!3e3!1sKyotoList_42"


class TestSourceIdFromName:
    def test_slugifies(self) -> None:
        assert source_id_from_name("Paul's Map") == "pauls-map"
        assert source_id_from_name("  Kyoto / Osaka 2026 ") == "kyoto-osaka-2026"

    def test_rejects_unsluggable_name(self) -> None:
        with pytest.raises(ConfigError):
            source_id_from_name("!!!")


class TestSourceFromUrl:
    def test_my_maps_url(self) -> None:
        source = source_from_url(MY_MAPS_URL, name="Paul's Map", owner="Paul")

        assert source == {
            "id": "pauls-map",
            "name": "Paul's Map",
            "fetch_id": "1o8S4w05Z4gPt7s6mfCoZXT46mOJEtV4",
            "format": "kml",
            "owner": "Paul",
        }

    def test_list_url(self) -> None:
        source = source_from_url(LIST_URL, name="Kyoto", source_id="kyoto")

        assert source["id"] == "kyoto"
        assert source["fetch_id"] == "KyotoList_42"
        assert source["format"] == "maps_list"
        assert "owner" not in source

    def test_unrecognised_url(self) -> None:
        with pytest.raises(ConfigError, match="Unrecognised map URL"):
            source_from_url("https://example.com/somewhere", name="Nowhere")


class TestScaffoldConfig:
    def test_defaults_only_sources(self) -> None:
        raw = scaffold_config()

        assert raw == {"sources": [dict(source) for source in DEFAULT_SOURCES]}

    def test_include_defaults_writes_every_setting(self) -> None:
        raw = scaffold_config(sources=[], include_defaults=True)

        assert raw["endpoint_base_url"] == "http://localhost:8888"
        assert raw["fetcher"] == "http"
        assert raw["storage_dir"] == ".placesync"
        assert raw["feeds_dir"] == "feeds"
        assert raw["history_limit"] == 50

    def test_file_fetcher_always_records_feeds_dir(self) -> None:
        raw = scaffold_config(sources=[], fetcher="file")

        assert raw["fetcher"] == "file"
        assert raw["feeds_dir"] == "feeds"

    def test_invalid_values_raise_config_error(self) -> None:
        with pytest.raises(ConfigError, match="invalid config"):
            scaffold_config(fetcher="carrier-pigeon")


def test_write_config_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "placesync.json"

    write_config({"sources": []}, target)

    assert json.loads(target.read_text(encoding="utf-8")) == {"sources": []}
    assert target.read_text(encoding="utf-8").endswith("\n")
