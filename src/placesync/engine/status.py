"""Per-source sync status and durable sync history."""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import TypeAdapter, ValidationError

from placesync.contracts.exceptions import StorageError
from placesync.contracts.storage import StorageBackend
from placesync.contracts.sync import SyncResult, SyncStatus, SyncStatusType

_LOG = logging.getLogger(__name__)

HISTORY_KEY_PREFIX = "sync_history_"
DEFAULT_HISTORY_LIMIT = 50

_HISTORY_ADAPTER = TypeAdapter(list[SyncResult])


def history_key(source_id: str) -> str:
    return f"{HISTORY_KEY_PREFIX}{source_id}"


def result_message(result: SyncResult) -> str:
    if not result.success:
        return result.error or "Sync failed"
    return f"Added {result.places_added} new places, {result.duplicates_skipped} duplicates skipped"


class SyncStatusTracker:
    """Live status per source, plus the last *history_limit* results of each.

    Statuses live in memory only; histories are persisted through the storage
    backend. History failures are logged and never raised, so a broken disk
    cannot fail a sync that otherwise succeeded.
    """

    def __init__(self, storage: StorageBackend, *, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self._storage = storage
        self._history_limit = history_limit
        self._statuses: dict[str, SyncStatus] = {}

    @property
    def history_limit(self) -> int:
        return self._history_limit

    def get_status(self, source_id: str) -> SyncStatus:
        return self._statuses.get(source_id) or SyncStatus(source_id=source_id)

    def all_statuses(self) -> dict[str, SyncStatus]:
        return dict(self._statuses)

    def update_status(self, source_id: str, status: SyncStatusType, message: str = "") -> SyncStatus:
        current = self.get_status(source_id)
        updated = current.model_copy(update={"status": status, "message": message})
        self._statuses[source_id] = updated
        _LOG.debug("Source %s is now %s", source_id, status)
        return updated

    async def record_result(self, result: SyncResult) -> SyncStatus:
        current = self.get_status(result.source_id)
        updates: dict[str, object] = {
            "status": SyncStatusType.SUCCESS if result.success else SyncStatusType.ERROR,
            "message": result_message(result),
            "places_found": result.places_found,
            "places_added": result.places_added,
            "duplicates_skipped": result.duplicates_skipped,
        }
        if result.success:
            updates["last_sync_at"] = result.synced_at
        status = current.model_copy(update=updates)
        self._statuses[result.source_id] = status

        history = await self.get_history(result.source_id)
        history.append(result)
        await self._write_history(result.source_id, history[-self._history_limit :])
        return status

    async def get_history(self, source_id: str) -> list[SyncResult]:
        try:
            raw = await self._storage.get(history_key(source_id))
        except StorageError:
            _LOG.exception("Failed to read sync history for %s", source_id)
            return []
        if raw is None:
            return []
        try:
            return _HISTORY_ADAPTER.validate_json(raw)
        except ValidationError:
            _LOG.warning("Discarding unreadable sync history for %s", source_id, extra={"source_id": source_id})
            return []

    async def latest_status(self, source_id: str) -> SyncStatus:
        """Live status, or the outcome of the last recorded sync when the source is idle."""
        status = self.get_status(source_id)
        if status.status != SyncStatusType.IDLE:
            return status
        history = await self.get_history(source_id)
        if not history:
            return status
        last = history[-1]
        return status.model_copy(
            update={
                "status": SyncStatusType.SUCCESS if last.success else SyncStatusType.ERROR,
                "message": result_message(last),
                "last_sync_at": last.synced_at if last.success else None,
                "places_found": last.places_found,
                "places_added": last.places_added,
                "duplicates_skipped": last.duplicates_skipped,
            }
        )

    async def get_last_sync_time(self, source_id: str) -> datetime | None:
        history = await self.get_history(source_id)
        if not history:
            return None
        return history[-1].synced_at

    async def clear_history(self, source_id: str) -> None:
        self._statuses.pop(source_id, None)
        try:
            await self._storage.remove(history_key(source_id))
        except StorageError:
            _LOG.exception("Failed to clear sync history for %s", source_id)

    async def _write_history(self, source_id: str, history: list[SyncResult]) -> None:
        try:
            await self._storage.set(
                history_key(source_id),
                _HISTORY_ADAPTER.dump_json(history, by_alias=True, exclude_none=True).decode(),
            )
        except StorageError:
            _LOG.exception("Failed to persist sync history for %s", source_id)
