"""Sync result and status contracts."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from placesync.contracts.place import CamelModel, utc_now


class SyncStatusType(StrEnum):
    IDLE = "idle"
    CONNECTING = "connecting"
    SYNCING = "syncing"
    SUCCESS = "success"
    ERROR = "error"


class SyncPhase(StrEnum):
    CONNECTING = "connecting"
    FETCHING = "fetching"
    PARSING = "parsing"
    PROCESSING = "processing"
    COMPLETING = "completing"


class SyncVerification(CamelModel):
    """Store size before and after a reconcile, used to catch miscounted adds."""

    before_count: int
    after_count: int
    actual_added: int
    counts_match: bool


class SyncResult(CamelModel):
    source_id: str
    source_name: str = ""
    success: bool
    places_found: int = 0
    places_added: int = 0
    duplicates_skipped: int = 0
    synced_at: datetime = Field(default_factory=utc_now)
    error: str | None = None
    verification: SyncVerification | None = None


class SyncStatus(CamelModel):
    source_id: str
    status: SyncStatusType = SyncStatusType.IDLE
    message: str = ""
    last_sync_at: datetime | None = None
    places_found: int = 0
    places_added: int = 0
    duplicates_skipped: int = 0


class ReconcileResult(CamelModel):
    added: int = 0
    duplicates_skipped: int = 0
    before_count: int = 0
    after_count: int = 0


class ImportResult(CamelModel):
    imported_count: int = 0
    message: str = ""


class ConnectionTestResult(CamelModel):
    success: bool
    source_id: str
    source_name: str
    error: str | None = None
