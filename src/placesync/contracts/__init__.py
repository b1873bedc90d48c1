"""Contracts-domain exports."""

from placesync.contracts.config import (
    DEFAULT_CITIES,
    DEFAULT_REGION,
    CityBounds,
    PlaceSyncConfig,
    RegionBounds,
    SourceConfig,
    SourceFormat,
)
from placesync.contracts.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    FetchError,
    FormatError,
    NameConflictError,
    PlaceSyncError,
    StorageError,
    SyncError,
)
from placesync.contracts.fetcher import FeedFetcher, FetchResponse
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
)
from placesync.contracts.storage import StorageBackend
from placesync.contracts.sync import (
    ConnectionTestResult,
    ImportResult,
    ReconcileResult,
    SyncPhase,
    SyncResult,
    SyncStatus,
    SyncStatusType,
    SyncVerification,
)

__all__ = [
    "DEFAULT_CITIES",
    "DEFAULT_REGION",
    "CityBounds",
    "ConfigError",
    "ConfigNotFoundError",
    "ConnectionTestResult",
    "Coordinates",
    "EditExport",
    "EditStatistics",
    "FeedFetcher",
    "FetchError",
    "FetchResponse",
    "FormatError",
    "ImportResult",
    "NameConflictError",
    "NewPlace",
    "Place",
    "PlaceCategory",
    "PlaceEditFields",
    "PlaceStatistics",
    "PlaceStorageData",
    "PlaceSyncConfig",
    "PlaceSyncError",
    "ReconcileResult",
    "RegionBounds",
    "SourceConfig",
    "SourceFormat",
    "StorageBackend",
    "StorageError",
    "SyncError",
    "SyncPhase",
    "SyncResult",
    "SyncStatus",
    "SyncStatusType",
    "SyncVerification",
    "UserPlaceEdit",
]
