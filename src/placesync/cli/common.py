"""Shared CLI formatting helpers."""

from __future__ import annotations

from datetime import datetime

from placesync.contracts.exceptions import ConfigError
from placesync.contracts.place import Coordinates, Place


def plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "never"
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def format_place_line(place: Place, *, distance_km: float | None = None) -> str:
    line = f"  {place.id:<32} {place.name}  [{place.category}, {place.city}]"
    if distance_km is not None:
        line += f"  {distance_km:.2f} km"
    return line


def format_counts(counts: dict[str, int]) -> str:
    parts = [f"{key}={value}" for key, value in counts.items() if value]
    return ", ".join(parts) if parts else "none"


def parse_point(value: str) -> Coordinates:
    try:
        latitude, longitude = (float(part) for part in value.split(","))
        return Coordinates(latitude=latitude, longitude=longitude)
    except ValueError as exc:
        raise ConfigError(f"expected LAT,LON, got {value!r}") from exc
