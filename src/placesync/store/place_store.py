"""Base-layer place records with a versioned user-edit overlay."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from types import TracebackType
from typing import Any

from pydantic import ValidationError

from placesync.contracts.exceptions import FormatError, NameConflictError, StorageError, SyncError
from placesync.contracts.place import (
    Coordinates,
    EditExport,
    EditStatistics,
    NewPlace,
    Place,
    PlaceCategory,
    PlaceEditFields,
    PlaceStatistics,
    PlaceStorageData,
    UserPlaceEdit,
    utc_now,
)
from placesync.contracts.storage import StorageBackend
from placesync.contracts.sync import ImportResult, ReconcileResult
from placesync.feeds.categorize import generate_place_id, haversine_km

_LOG = logging.getLogger(__name__)

PLACES_KEY = "places"
LEGACY_PLACES_KEY = "syncedPlaces"
USER_SOURCE_ID = "user"


class PlaceStore:
    """Owns the base place records and the edit overlay, and persists both.

    Base records come from feed reconciles or :meth:`add_place` and are never
    modified afterwards; user changes live in :class:`UserPlaceEdit` entries
    keyed by the base record's id. :meth:`get_effective_places` merges the two
    layers on demand.

    Use :meth:`open` before mutating (or ``async with store``). Every mutation
    flushes the whole :class:`PlaceStorageData` blob; flush failures are logged
    and counted in :attr:`flush_failures` but never raised.
    """

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage
        self._original_places: list[Place] = []
        self._user_edits: list[UserPlaceEdit] = []
        self._place_sources: dict[str, str] = {}
        self._last_sync_at: datetime | None = None
        self._lock = asyncio.Lock()
        self._opened = False
        self.flush_failures = 0

    # -- lifecycle ----------------------------------------------------------

    async def __aenter__(self) -> PlaceStore:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def is_open(self) -> bool:
        return self._opened

    async def open(self) -> None:
        async with self._lock:
            data = await self._load()
            self._original_places = list(data.original_places)
            self._user_edits = list(data.user_edits)
            self._place_sources = dict(data.place_sources)
            self._last_sync_at = data.last_sync_at
            self._opened = True
        _LOG.debug(
            "Opened place store with %d base records and %d edits",
            len(self._original_places),
            len(self._user_edits),
        )

    async def flush(self) -> bool:
        async with self._lock:
            return await self._write()

    async def close(self) -> None:
        if not self._opened:
            return
        await self.flush()
        self._opened = False

    # -- effective view -----------------------------------------------------

    @property
    def count(self) -> int:
        """Number of base records across all sources."""
        return len(self._original_places)

    @property
    def last_sync_at(self) -> datetime | None:
        return self._last_sync_at

    def get_effective_places(self) -> list[Place]:
        return [effective for _, effective in self._merged()]

    def get_place(self, place_id: str) -> Place | None:
        return next((place for place in self.get_effective_places() if place.id == place_id), None)

    def get_place_by_name(self, name: str) -> Place | None:
        return next((place for place in self.get_effective_places() if place.name == name), None)

    def get_edit(self, place_id: str) -> UserPlaceEdit | None:
        base = self._resolve_base(place_id)
        if base is None:
            return None
        return self._edit_index().get(base.id)

    def get_places_by_category(self, category: PlaceCategory) -> list[Place]:
        return [place for place in self.get_effective_places() if place.category == category]

    def get_places_by_city(self, city: str) -> list[Place]:
        wanted = city.lower()
        return [place for place in self.get_effective_places() if place.city.lower() == wanted]

    def get_places_by_source(self, source_id: str) -> list[Place]:
        return [
            effective
            for base, effective in self._merged()
            if self._place_sources.get(base.id, USER_SOURCE_ID) == source_id
        ]

    def source_of(self, place_id: str) -> str | None:
        base = self._resolve_base(place_id)
        if base is None:
            return None
        return self._place_sources.get(base.id, USER_SOURCE_ID)

    def search_places(self, query: str) -> list[Place]:
        needle = query.lower()
        return [
            place
            for place in self.get_effective_places()
            if needle in place.name.lower() or (place.description and needle in place.description.lower())
        ]

    def find_nearby_places(self, origin: Coordinates, radius_km: float) -> list[tuple[Place, float]]:
        nearby: list[tuple[Place, float]] = []
        for place in self.get_effective_places():
            if place.coordinates is None:
                continue
            distance = haversine_km(origin, place.coordinates)
            if distance <= radius_km:
                nearby.append((place, distance))
        return sorted(nearby, key=lambda pair: pair[1])

    def get_statistics(self) -> PlaceStatistics:
        stats = PlaceStatistics()
        for place in self.get_effective_places():
            stats.total += 1
            stats.by_category[place.category] += 1
            stats.by_city[place.city] = stats.by_city.get(place.city, 0) + 1
        return stats

    def get_edit_statistics(self) -> EditStatistics:
        last_edit_at = max((edit.edited_at for edit in self._user_edits), default=None)
        return EditStatistics(
            total_edits=len(self._user_edits),
            edited_places=len({edit.place_id for edit in self._user_edits}),
            last_edit_at=last_edit_at,
        )

    # -- mutations ----------------------------------------------------------

    async def reconcile(self, source_id: str, incoming: Iterable[Place]) -> ReconcileResult:
        """Append feed places that the store does not know yet.

        A place is a duplicate when its id or name matches any base record
        (from any source) or any place in the effective view, so repeating a
        sync with unchanged feed content adds nothing.
        """
        self._require_open()
        async with self._lock:
            before = len(self._original_places)
            taken_ids, taken_names = self._taken_keys()
            added = 0
            skipped = 0
            for place in incoming:
                if place.id in taken_ids or place.name in taken_names:
                    skipped += 1
                    continue
                self._original_places.append(place)
                self._place_sources[place.id] = source_id
                taken_ids.add(place.id)
                taken_names.add(place.name)
                added += 1
            after = len(self._original_places)
            self._last_sync_at = utc_now()
            await self._write()

        _LOG.info("Reconciled source %s: %d added, %d duplicates skipped", source_id, added, skipped)
        return ReconcileResult(added=added, duplicates_skipped=skipped, before_count=before, after_count=after)

    async def add_place(self, new_place: Place | NewPlace) -> bool:
        """Add a user-authored base record; ``False`` if the name or id is taken."""
        self._require_open()
        async with self._lock:
            place_id = generate_place_id(new_place.name)
            taken_ids, _ = self._taken_keys()
            effective_names = {place.name for place in self.get_effective_places()}
            if new_place.name in effective_names or place_id in taken_ids:
                _LOG.warning("%s", NameConflictError(f"Place already exists: {new_place.name!r} ({place_id})"))
                return False

            place = Place.model_validate({**new_place.model_dump(exclude={"id"}), "id": place_id})
            self._original_places.append(place)
            self._place_sources[place.id] = USER_SOURCE_ID
            await self._write()
        return True

    async def update_place(self, place_id: str, fields: PlaceEditFields | dict[str, Any]) -> bool:
        """Record a user edit for *place_id* (an effective or base id).

        Returns ``False`` when the place cannot be resolved or a rename would
        collide with another place's name or id.
        """
        self._require_open()
        edit_fields = fields if isinstance(fields, PlaceEditFields) else PlaceEditFields.model_validate(fields)
        async with self._lock:
            base = self._resolve_base(place_id)
            if base is None:
                _LOG.debug("Cannot edit unknown place %s", place_id)
                return False

            if edit_fields.name is not None and self._rename_conflicts(base, edit_fields.name):
                _LOG.warning("%s", NameConflictError(f"Rename of {place_id!r} to {edit_fields.name!r} collides"))
                return False

            now = utc_now()
            addressed_as = place_id if place_id != base.id else None
            index = self._edit_position(base.id)
            if index is None:
                self._user_edits.append(
                    UserPlaceEdit(
                        place_id=base.id,
                        original_place_id=addressed_as,
                        edited_fields=edit_fields,
                        edited_at=now,
                        version=1,
                    )
                )
            else:
                current = self._user_edits[index]
                self._user_edits[index] = current.model_copy(
                    update={
                        "original_place_id": addressed_as or current.original_place_id,
                        "edited_fields": current.edited_fields.merged_with(edit_fields),
                        "edited_at": now,
                        "version": current.version + 1,
                    }
                )
            await self._write()
        return True

    def export_edits(self) -> str:
        export = EditExport(user_edits=list(self._user_edits))
        return export.model_dump_json(by_alias=True, exclude_none=True, indent=2)

    async def import_edits(self, blob: str) -> ImportResult:
        """Merge an exported edit set into the overlay, highest version wins.

        Raises:
            FormatError: If *blob* is not an edit export.
        """
        self._require_open()
        try:
            payload: Any = json.loads(blob)
        except json.JSONDecodeError as exc:
            raise FormatError(f"Invalid edit export: {exc}") from exc
        raw_edits = payload.get("userEdits") if isinstance(payload, dict) else None
        if not isinstance(raw_edits, list):
            raise FormatError("Invalid edit export: missing 'userEdits' list")

        incoming: list[UserPlaceEdit] = []
        for raw in raw_edits:
            try:
                incoming.append(UserPlaceEdit.model_validate(raw))
            except ValidationError:
                _LOG.debug("Skipping malformed imported edit: %r", raw)

        imported = 0
        async with self._lock:
            for edit in incoming:
                edit = self._relink(edit)
                if self._import_renames_onto_other_place(edit):
                    conflict = NameConflictError(
                        f"Imported rename of {edit.place_id!r} to {edit.edited_fields.name!r} collides"
                    )
                    _LOG.warning("%s", conflict)
                    continue
                index = self._matching_edit_position(edit)
                if index is None:
                    self._user_edits.append(edit)
                    imported += 1
                elif edit.version > self._user_edits[index].version:
                    self._user_edits[index] = edit
                    imported += 1
            if imported:
                await self._write()

        return ImportResult(imported_count=imported, message=f"Successfully imported {imported} edits")

    async def reset(self) -> None:
        self._require_open()
        async with self._lock:
            self._original_places.clear()
            self._user_edits.clear()
            self._place_sources.clear()
            self._last_sync_at = None
            await self._write()

    # -- internals ----------------------------------------------------------

    def _require_open(self) -> None:
        if not self._opened:
            raise SyncError("Place store is not open. Call open() or use 'async with'.")

    def _edit_index(self) -> dict[str, UserPlaceEdit]:
        index: dict[str, UserPlaceEdit] = {}
        for edit in self._user_edits:
            index.setdefault(edit.place_id, edit)
        base_ids = {base.id for base in self._original_places}
        for edit in self._user_edits:
            # Only edits not keyed by a base record fall back to the id they were addressed by.
            if edit.original_place_id and edit.place_id not in base_ids:
                index.setdefault(edit.original_place_id, edit)
        return index

    def _merged(self) -> Iterator[tuple[Place, Place]]:
        edits = self._edit_index()
        for base in self._original_places:
            edit = edits.get(base.id)
            if edit is None:
                yield base, base
                continue
            updates = edit.edited_fields.updates()
            if "name" in updates:
                updates["id"] = generate_place_id(updates["name"])
            yield base, base.model_copy(update=updates)

    def _taken_keys(self) -> tuple[set[str], set[str]]:
        ids: set[str] = set()
        names: set[str] = set()
        for base, effective in self._merged():
            ids.update((base.id, effective.id))
            names.update((base.name, effective.name))
        return ids, names

    def _resolve_base(self, place_id: str) -> Place | None:
        for base, effective in self._merged():
            if effective.id == place_id:
                return base
        return next((base for base in self._original_places if base.id == place_id), None)

    def _rename_conflicts(self, base: Place, new_name: str) -> bool:
        new_id = generate_place_id(new_name)
        for other_base, other in self._merged():
            if other_base is base:
                continue
            if other.name == new_name or other.id == new_id or other_base.id == new_id:
                return True
        return False

    def _edit_position(self, base_id: str) -> int | None:
        for position, edit in enumerate(self._user_edits):
            if edit.place_id == base_id:
                return position
        base_ids = {base.id for base in self._original_places}
        for position, edit in enumerate(self._user_edits):
            if edit.original_place_id == base_id and edit.place_id not in base_ids:
                return position
        return None

    def _matching_edit_position(self, incoming: UserPlaceEdit) -> int | None:
        keys = {incoming.place_id, incoming.original_place_id} - {None}
        for position, edit in enumerate(self._user_edits):
            if edit.place_id in keys or (edit.original_place_id is not None and edit.original_place_id in keys):
                return position
        return None

    def _relink(self, edit: UserPlaceEdit) -> UserPlaceEdit:
        """Re-key an imported edit onto the base record it refers to."""
        base_ids = {base.id for base in self._original_places}
        if edit.place_id in base_ids:
            return edit
        if edit.original_place_id in base_ids:
            return edit
        base = self._resolve_base(edit.place_id)
        if base is None:
            return edit
        return edit.model_copy(update={"place_id": base.id, "original_place_id": edit.place_id})

    def _import_renames_onto_other_place(self, edit: UserPlaceEdit) -> bool:
        if edit.edited_fields.name is None:
            return False
        base_ids = (edit.place_id, edit.original_place_id)
        base = next((place for place in self._original_places if place.id in base_ids), None)
        if base is None:
            return False
        return self._rename_conflicts(base, edit.edited_fields.name)

    async def _load(self) -> PlaceStorageData:
        try:
            raw = await self._storage.get(PLACES_KEY)
        except StorageError:
            _LOG.exception("Failed to load place storage; starting empty")
            return PlaceStorageData()

        if raw is None:
            return await self._migrate_legacy()

        try:
            return PlaceStorageData.model_validate_json(raw)
        except ValidationError:
            _LOG.exception("Stored place data is unreadable; keeping a copy and starting empty")
            try:
                await self._storage.set(f"{PLACES_KEY}.corrupt", raw)
            except StorageError:
                _LOG.exception("Failed to keep a copy of unreadable place data")
            return PlaceStorageData()

    async def _migrate_legacy(self) -> PlaceStorageData:
        try:
            legacy_raw = await self._storage.get(LEGACY_PLACES_KEY)
        except StorageError:
            _LOG.exception("Failed to read legacy place storage")
            return PlaceStorageData()
        if legacy_raw is None:
            return PlaceStorageData()

        try:
            payload: Any = json.loads(legacy_raw)
            places = [Place.model_validate(item) for item in payload]
        except (json.JSONDecodeError, TypeError, ValidationError):
            _LOG.exception("Legacy place storage is unreadable; ignoring it")
            return PlaceStorageData()

        data = PlaceStorageData(original_places=places)
        try:
            await self._storage.set(PLACES_KEY, data.model_dump_json(by_alias=True, exclude_none=True))
            await self._storage.remove(LEGACY_PLACES_KEY)
        except StorageError:
            _LOG.exception("Failed to persist migrated legacy places")
        else:
            _LOG.info("Migrated %d places from legacy storage", len(places))
        return data

    async def _write(self) -> bool:
        data = PlaceStorageData(
            original_places=self._original_places,
            user_edits=self._user_edits,
            last_sync_at=self._last_sync_at,
            place_sources=self._place_sources,
        )
        try:
            await self._storage.set(PLACES_KEY, data.model_dump_json(by_alias=True, exclude_none=True))
        except (StorageError, OSError):
            self.flush_failures += 1
            _LOG.exception("Failed to persist place storage", extra={"flush_failures": self.flush_failures})
            return False
        return True

