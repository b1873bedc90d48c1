"""Config scaffolding helpers used by ``placesync init``."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from placesync.contracts.config import PlaceSyncConfig, SourceFormat
from placesync.contracts.exceptions import ConfigError
from placesync.feeds.parser import classify_url, extract_list_id_from_url, extract_map_id_from_url

_ENDPOINT_DEFAULT = "http://localhost:8888"
_FETCHER_DEFAULT = "http"
_STORAGE_DIR_DEFAULT = ".placesync"
_FEEDS_DIR_DEFAULT = "feeds"

DEFAULT_SOURCES: tuple[dict[str, str], ...] = (
    {
        "id": "pauls-map",
        "name": "Paul's Map",
        "owner": "Paul",
        "fetch_id": "1o8S4w05Z4gPt7s6mfCoZXT46mOJEtV4",
        "format": SourceFormat.KML.value,
    },
    {
        "id": "michelles-map",
        "name": "Michelle's Map",
        "owner": "Michelle",
        "fetch_id": "1LQROJade9LoCh-Y1kyXgpKtT-CCRZaU",
        "format": SourceFormat.KML.value,
    },
)


def source_id_from_name(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower().replace("'", "")).strip("-")
    if not slug:
        raise ConfigError(f"cannot derive a source id from {name!r}")
    return slug


def source_from_url(url: str, *, name: str, owner: str | None = None, source_id: str | None = None) -> dict[str, str]:
    """Build a source entry from a shared map or list URL."""
    source_format = classify_url(url)
    fetch_id = extract_map_id_from_url(url) if source_format == SourceFormat.KML else extract_list_id_from_url(url)
    source: dict[str, str] = {
        "id": source_id or source_id_from_name(name),
        "name": name,
        "fetch_id": fetch_id,
        "format": source_format.value,
    }
    if owner:
        source["owner"] = owner
    return source


def scaffold_config(
    *,
    sources: list[dict[str, str]] | None = None,
    endpoint_base_url: str = _ENDPOINT_DEFAULT,
    fetcher: str = _FETCHER_DEFAULT,
    storage_dir: str = _STORAGE_DIR_DEFAULT,
    feeds_dir: str = _FEEDS_DIR_DEFAULT,
    history_limit: int = 50,
    include_defaults: bool = False,
) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "sources": [dict(source) for source in (DEFAULT_SOURCES if sources is None else sources)],
    }

    if include_defaults or endpoint_base_url != _ENDPOINT_DEFAULT:
        raw["endpoint_base_url"] = endpoint_base_url
    if include_defaults or fetcher != _FETCHER_DEFAULT:
        raw["fetcher"] = fetcher
    if include_defaults or storage_dir != _STORAGE_DIR_DEFAULT:
        raw["storage_dir"] = storage_dir
    if include_defaults or fetcher == "file" or feeds_dir != _FEEDS_DIR_DEFAULT:
        raw["feeds_dir"] = feeds_dir
    if include_defaults or history_limit != 50:
        raw["history_limit"] = history_limit

    try:
        PlaceSyncConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    return raw


def write_config(config: dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
