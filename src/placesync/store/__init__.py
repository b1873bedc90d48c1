"""Place persistence: storage backends and the edit-overlay store."""

from placesync.store.backends import FileStorageBackend, MemoryStorageBackend
from placesync.store.place_store import LEGACY_PLACES_KEY, PLACES_KEY, USER_SOURCE_ID, PlaceStore

__all__ = [
    "FileStorageBackend",
    "LEGACY_PLACES_KEY",
    "MemoryStorageBackend",
    "PLACES_KEY",
    "PlaceStore",
    "USER_SOURCE_ID",
]
