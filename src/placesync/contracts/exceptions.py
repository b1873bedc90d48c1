"""Exception hierarchy for placesync.

All placesync exceptions inherit from :class:`PlaceSyncError`, so callers can
catch any library error with a single ``except`` clause while still handling
specific failure modes.
"""

from __future__ import annotations


class PlaceSyncError(Exception):
    """Base exception for all placesync errors."""


class ConfigError(PlaceSyncError):
    """Configuration loading or validation failure."""


class ConfigNotFoundError(ConfigError):
    """A source id does not match any configured source."""

    def __init__(self, source_id: str) -> None:
        super().__init__(f"Source configuration not found: {source_id!r}")
        self.source_id = source_id


class FormatError(PlaceSyncError):
    """A payload is missing the structural markers of its declared format."""


class FetchError(PlaceSyncError):
    """Fetching a feed from its external endpoint failed."""

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.details = details


class StorageError(PlaceSyncError):
    """Reading or writing durable storage failed."""


class NameConflictError(PlaceSyncError):
    """Adding or renaming a place would collide with an existing place."""


class SyncError(PlaceSyncError):
    """Engine-level synchronization failure."""
