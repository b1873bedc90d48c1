"""SDK composition root for placesync."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import TypeVar

from placesync.contracts.config import PlaceSyncConfig, SourceConfig
from placesync.contracts.fetcher import FeedFetcher
from placesync.contracts.storage import StorageBackend
from placesync.contracts.sync import ConnectionTestResult, SyncResult
from placesync.engine import SyncOrchestrator, SyncStatusTracker
from placesync.engine.progress import SyncProgress
from placesync.feeds.parser import FeedParser
from placesync.fetchers import create_fetcher
from placesync.store import FileStorageBackend, PlaceStore

T = TypeVar("T")


class PlaceSync:
    """placesync SDK public API.

    Wires a :class:`PlaceStore`, a :class:`SyncStatusTracker`, a
    :class:`FeedParser` and a fetcher together from one config. Open it
    (``async with PlaceSync.from_config(config) as app``) before syncing or
    editing places.
    """

    def __init__(
        self,
        *,
        config: PlaceSyncConfig,
        storage: StorageBackend,
        fetcher: FeedFetcher | None = None,
        progress: SyncProgress | None = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._progress = progress
        self._parser = FeedParser(cities=config.cities, region=config.region)
        self._store = PlaceStore(storage)
        self._tracker = SyncStatusTracker(storage, history_limit=config.history_limit)

    @classmethod
    def from_config(
        cls,
        config: PlaceSyncConfig,
        *,
        progress: SyncProgress | None = None,
        storage: StorageBackend | None = None,
        fetcher: FeedFetcher | None = None,
    ) -> PlaceSync:
        return cls(
            config=config,
            storage=storage or FileStorageBackend(config.storage_dir),
            fetcher=fetcher,
            progress=progress,
        )

    async def __aenter__(self) -> PlaceSync:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def open(self) -> None:
        await self._store.open()

    async def close(self) -> None:
        await self._store.close()

    @property
    def config(self) -> PlaceSyncConfig:
        return self._config

    @property
    def store(self) -> PlaceStore:
        return self._store

    @property
    def tracker(self) -> SyncStatusTracker:
        return self._tracker

    @property
    def parser(self) -> FeedParser:
        return self._parser

    def sources(self) -> list[SourceConfig]:
        return list(self._config.sources)

    async def sync(self, source_id: str) -> SyncResult:
        return await self._with_orchestrator(lambda orchestrator: orchestrator.sync(source_id))

    async def sync_all(self) -> list[SyncResult]:
        return await self._with_orchestrator(lambda orchestrator: orchestrator.sync_all())

    async def test_connection(self, source_id: str) -> ConnectionTestResult:
        return await self._with_orchestrator(lambda orchestrator: orchestrator.test_connection(source_id))

    async def _with_orchestrator(self, action: Callable[[SyncOrchestrator], Awaitable[T]]) -> T:
        fetcher = self._fetcher or create_fetcher(self._config.fetcher, self._config)
        async with fetcher:
            orchestrator = SyncOrchestrator(
                self._config.sources,
                fetcher,
                self._parser,
                self._store,
                self._tracker,
                progress=self._progress,
            )
            return await action(orchestrator)
