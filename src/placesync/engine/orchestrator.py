"""Source sync pipeline: fetch, parse, reconcile and record."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from placesync.contracts.config import SourceConfig
from placesync.contracts.exceptions import ConfigNotFoundError, FetchError, FormatError, PlaceSyncError
from placesync.contracts.fetcher import FeedFetcher, FetchResponse
from placesync.contracts.sync import (
    ConnectionTestResult,
    SyncPhase,
    SyncResult,
    SyncStatusType,
    SyncVerification,
)
from placesync.engine.progress import NullSyncProgress, SyncProgress
from placesync.engine.status import SyncStatusTracker
from placesync.feeds.parser import FeedParser
from placesync.store.place_store import PlaceStore

_LOG = logging.getLogger(__name__)


class SyncOrchestrator:
    """Runs the five-phase sync of a source into a :class:`PlaceStore`.

    Fetch failures never escape :meth:`sync`; they become an unsuccessful
    :class:`SyncResult`. A payload that cannot be parsed is recorded as a
    failure and the :class:`FormatError` is re-raised.
    """

    def __init__(
        self,
        sources: Sequence[SourceConfig],
        fetcher: FeedFetcher,
        parser: FeedParser,
        store: PlaceStore,
        tracker: SyncStatusTracker,
        *,
        progress: SyncProgress | None = None,
    ) -> None:
        self._sources = {source.id: source for source in sources}
        self._fetcher = fetcher
        self._parser = parser
        self._store = store
        self._tracker = tracker
        self._progress: SyncProgress = progress or NullSyncProgress()

    @property
    def sources(self) -> list[SourceConfig]:
        return list(self._sources.values())

    def _source(self, source_id: str) -> SourceConfig:
        source = self._sources.get(source_id)
        if source is None:
            raise ConfigNotFoundError(source_id)
        return source

    async def sync(self, source_id: str) -> SyncResult:
        source = self._source(source_id)
        self._progress.source_start(source.id, source.name)

        with self._phase(SyncPhase.CONNECTING):
            self._tracker.update_status(source.id, SyncStatusType.CONNECTING, f"Connecting to {source.name}...")

        try:
            return await self._sync_source(source)
        except FormatError:
            raise
        except Exception as exc:
            _LOG.exception("Sync of %s failed unexpectedly", source.id, extra={"source_id": source.id})
            await self._record_failure(source, str(exc) or type(exc).__name__)
            raise

    async def _sync_source(self, source: SourceConfig) -> SyncResult:
        try:
            with self._phase(SyncPhase.FETCHING):
                self._tracker.update_status(source.id, SyncStatusType.SYNCING, f"Fetching {source.name}...")
                payload = await self._fetch_payload(source)
        except FetchError as exc:
            _LOG.warning("Sync of %s failed while fetching: %s", source.id, exc, extra={"source_id": source.id})
            return await self._record_failure(source, str(exc))

        try:
            with self._phase(SyncPhase.PARSING):
                places = self._parser.parse(payload, source.format)
                self._progress.item_done(SyncPhase.PARSING)
        except FormatError as exc:
            await self._record_failure(source, str(exc))
            raise

        with self._phase(SyncPhase.PROCESSING, total=len(places)):
            reconciled = await self._store.reconcile(source.id, places)
        actual_added = reconciled.after_count - reconciled.before_count
        verification = SyncVerification(
            before_count=reconciled.before_count,
            after_count=reconciled.after_count,
            actual_added=actual_added,
            counts_match=actual_added == reconciled.added,
        )
        if not verification.counts_match:
            _LOG.warning(
                "Count mismatch syncing %s: reported %d added, store grew by %d",
                source.id,
                reconciled.added,
                actual_added,
                extra={"source_id": source.id},
            )

        with self._phase(SyncPhase.COMPLETING):
            result = SyncResult(
                source_id=source.id,
                source_name=source.name,
                success=True,
                places_found=len(places),
                places_added=reconciled.added,
                duplicates_skipped=reconciled.duplicates_skipped,
                verification=verification,
            )
            await self._tracker.record_result(result)
        _LOG.info(
            "Synced %s: %d found, %d added, %d duplicates skipped",
            source.id,
            result.places_found,
            result.places_added,
            result.duplicates_skipped,
        )
        return result

    async def sync_all(self) -> list[SyncResult]:
        results: list[SyncResult] = []
        for source in self._sources.values():
            try:
                results.append(await self.sync(source.id))
            except PlaceSyncError as exc:
                _LOG.warning("Sync of %s aborted: %s", source.id, exc, extra={"source_id": source.id})
                results.append(SyncResult(source_id=source.id, source_name=source.name, success=False, error=str(exc)))
            except Exception as exc:
                error = str(exc) or type(exc).__name__
                results.append(SyncResult(source_id=source.id, source_name=source.name, success=False, error=error))
        return results

    async def test_connection(self, source_id: str) -> ConnectionTestResult:
        source = self._source(source_id)
        self._tracker.update_status(source.id, SyncStatusType.CONNECTING, f"Testing connection to {source.name}...")
        try:
            await self._fetch_payload(source)
        except FetchError as exc:
            self._tracker.update_status(source.id, SyncStatusType.ERROR, str(exc))
            return ConnectionTestResult(success=False, source_id=source.id, source_name=source.name, error=str(exc))
        self._tracker.update_status(source.id, SyncStatusType.SUCCESS, "Connection successful")
        return ConnectionTestResult(success=True, source_id=source.id, source_name=source.name)

    async def _fetch_payload(self, source: SourceConfig) -> str:
        response: FetchResponse = await self._fetcher.fetch(source)
        if not response.success:
            raise FetchError(response.error or "Fetch failed", details=response.details)
        if not response.payload:
            raise FetchError("Empty response from feed endpoint")
        return response.payload

    async def _record_failure(self, source: SourceConfig, error: str) -> SyncResult:
        result = SyncResult(source_id=source.id, source_name=source.name, success=False, error=error)
        await self._tracker.record_result(result)
        return result

    @contextmanager
    def _phase(self, phase: SyncPhase, total: int | None = None) -> Iterator[None]:
        self._progress.phase_start(phase, total=total)
        try:
            yield
        except BaseException as exc:
            self._progress.phase_error(phase, exc)
            raise
        self._progress.phase_done(phase)
