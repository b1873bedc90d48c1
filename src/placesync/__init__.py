"""placesync: sync shared place feeds into a local store with a user-edit overlay."""

from placesync.config import load_config
from placesync.contracts import (
    ConfigError,
    ConfigNotFoundError,
    Coordinates,
    FetchError,
    FormatError,
    NewPlace,
    Place,
    PlaceCategory,
    PlaceEditFields,
    PlaceSyncConfig,
    PlaceSyncError,
    SourceConfig,
    SourceFormat,
    StorageError,
    SyncError,
    SyncResult,
    SyncStatus,
)
from placesync.engine import NullSyncProgress, SyncOrchestrator, SyncProgress, SyncStatusTracker
from placesync.feeds import FeedParser
from placesync.sdk import PlaceSync
from placesync.store import FileStorageBackend, MemoryStorageBackend, PlaceStore

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "Coordinates",
    "FeedParser",
    "FetchError",
    "FileStorageBackend",
    "FormatError",
    "MemoryStorageBackend",
    "NewPlace",
    "NullSyncProgress",
    "Place",
    "PlaceCategory",
    "PlaceEditFields",
    "PlaceStore",
    "PlaceSync",
    "PlaceSyncConfig",
    "PlaceSyncError",
    "SourceConfig",
    "SourceFormat",
    "StorageError",
    "SyncError",
    "SyncOrchestrator",
    "SyncProgress",
    "SyncResult",
    "SyncStatus",
    "SyncStatusTracker",
    "load_config",
    "__version__",
]
