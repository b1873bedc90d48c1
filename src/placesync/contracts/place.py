"""Place, edit-overlay and storage contracts."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EDIT_EXPORT_VERSION = "1.0"


def utc_now() -> datetime:
    return datetime.now(UTC)


class PlaceCategory(StrEnum):
    ACCOMMODATION = "accommodation"
    RESTAURANT = "restaurant"
    ENTERTAINMENT = "entertainment"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    HARDWARE = "hardware"


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class Coordinates(CamelModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Place(CamelModel):
    """A point of interest. Base records are never mutated, only copied."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: PlaceCategory
    city: str
    coordinates: Coordinates | None = None
    description: str | None = None


class NewPlace(CamelModel):
    """A user-authored place before its id has been derived from the name."""

    name: str = Field(min_length=1)
    category: PlaceCategory
    city: str
    coordinates: Coordinates | None = None
    description: str | None = None


class PlaceEditFields(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    category: PlaceCategory | None = None
    description: str | None = None

    def updates(self) -> dict[str, Any]:
        """Fields carried by this edit, ready to overlay onto a base record."""
        return self.model_dump(exclude_none=True)

    def merged_with(self, other: PlaceEditFields) -> PlaceEditFields:
        return PlaceEditFields.model_validate({**self.updates(), **other.updates()})


class UserPlaceEdit(CamelModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    place_id: str = Field(min_length=1)
    original_place_id: str | None = None
    edited_fields: PlaceEditFields
    edited_at: datetime
    version: int = Field(ge=1)

    def matches(self, place_id: str) -> bool:
        return place_id in (self.place_id, self.original_place_id)


class PlaceStorageData(CamelModel):
    """Durable state of a place store, read and written as one blob."""

    original_places: list[Place] = Field(default_factory=list)
    user_edits: list[UserPlaceEdit] = Field(default_factory=list)
    last_sync_at: datetime | None = None
    place_sources: dict[str, str] = Field(default_factory=dict)


class EditExport(CamelModel):
    user_edits: list[UserPlaceEdit] = Field(default_factory=list)
    exported_at: datetime = Field(default_factory=utc_now)
    version: str = EDIT_EXPORT_VERSION


class PlaceStatistics(CamelModel):
    total: int = 0
    by_category: dict[PlaceCategory, int] = Field(
        default_factory=lambda: {category: 0 for category in PlaceCategory}
    )
    by_city: dict[str, int] = Field(default_factory=dict)


class EditStatistics(CamelModel):
    total_edits: int = 0
    edited_places: int = 0
    last_edit_at: datetime | None = None
