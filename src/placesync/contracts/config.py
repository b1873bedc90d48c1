"""Configuration contracts."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class SourceFormat(StrEnum):
    KML = "kml"
    MAPS_LIST = "maps_list"
    AUTO = "auto"


class SourceConfig(BaseModel):
    """One externally syncable map or list."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    fetch_id: str = Field(min_length=1)
    owner: str | None = None
    format: SourceFormat = SourceFormat.KML

    model_config = {"frozen": True}


class CityBounds(BaseModel):
    name: str
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_ranges(self) -> CityBounds:
        if self.min_latitude > self.max_latitude or self.min_longitude > self.max_longitude:
            raise ValueError(f"bounding box for {self.name!r} has min greater than max")
        return self

    def contains(self, latitude: float, longitude: float) -> bool:
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )


class RegionBounds(CityBounds):
    """Outer box inside which unmatched points fall back to the first city."""


DEFAULT_CITIES: tuple[CityBounds, ...] = (
    CityBounds(name="Tokyo", min_latitude=35.4, max_latitude=35.9, min_longitude=139.3, max_longitude=140.0),
    CityBounds(name="Osaka", min_latitude=34.4, max_latitude=34.9, min_longitude=135.2, max_longitude=135.8),
    CityBounds(name="Kyoto", min_latitude=34.8, max_latitude=35.2, min_longitude=135.5, max_longitude=136.0),
)

DEFAULT_REGION = RegionBounds(
    name="Japan", min_latitude=24.0, max_latitude=46.0, min_longitude=123.0, max_longitude=146.0
)


class PlaceSyncConfig(BaseModel):
    endpoint_base_url: str = "http://localhost:8888"
    fetcher: str = "http"
    feeds_dir: Path = Path("feeds")
    storage_dir: Path = Path(".placesync")
    sources: list[SourceConfig] = Field(default_factory=list)
    cities: list[CityBounds] = Field(default_factory=lambda: list(DEFAULT_CITIES))
    region: RegionBounds = DEFAULT_REGION
    history_limit: int = Field(default=50, ge=1, le=500)
    request_timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=0, le=10)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_sources(self) -> PlaceSyncConfig:
        seen: set[str] = set()
        for source in self.sources:
            if source.id in seen:
                raise ValueError(f"duplicate source id: {source.id}")
            seen.add(source.id)
        if self.fetcher not in {"http", "file"}:
            raise ValueError("fetcher must be one of: http, file")
        if not self.cities:
            raise ValueError("at least one city bounding box is required")
        return self

    def get_source(self, source_id: str) -> SourceConfig | None:
        return next((source for source in self.sources if source.id == source_id), None)
