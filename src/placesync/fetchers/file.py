"""Fetcher that reads feeds from a local directory."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from types import TracebackType

from placesync.contracts.config import SourceConfig
from placesync.contracts.exceptions import FetchError
from placesync.contracts.fetcher import FeedFetcher, FetchResponse

_LOG = logging.getLogger(__name__)

FEED_SUFFIXES = (".kml", ".json", ".txt")


class FileFeedFetcher(FeedFetcher):
    """Reads ``<feeds_dir>/<fetch_id><suffix>`` for offline syncs."""

    def __init__(self, feeds_dir: Path) -> None:
        self._feeds_dir = feeds_dir

    async def __aenter__(self) -> FileFeedFetcher:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        return None

    def resolve(self, source: SourceConfig) -> Path:
        for suffix in FEED_SUFFIXES:
            candidate = self._feeds_dir / f"{source.fetch_id}{suffix}"
            if candidate.is_file():
                return candidate
        raise FetchError(
            f"No feed file for {source.name}",
            details=f"looked for {source.fetch_id}{{{','.join(FEED_SUFFIXES)}}} in {self._feeds_dir}",
        )

    async def fetch(self, source: SourceConfig) -> FetchResponse:
        path = self.resolve(source)
        try:
            payload = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FetchError(f"Failed to read {path}", details=str(exc)) from exc
        _LOG.debug("Read %d bytes for %s from %s", len(payload), source.id, path)
        return FetchResponse(success=True, payload=payload)
