"""Feed fetcher adapter contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from types import TracebackType

from pydantic import BaseModel, Field

from placesync.contracts.config import SourceConfig
from placesync.contracts.place import utc_now


class FetchResponse(BaseModel):
    success: bool
    payload: str | None = None
    error: str | None = None
    details: str | None = None
    fetched_at: datetime = Field(default_factory=utc_now)


class FeedFetcher(ABC):
    """Retrieves the raw payload of one source from wherever it is published."""

    @abstractmethod
    async def __aenter__(self) -> FeedFetcher: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def fetch(self, source: SourceConfig) -> FetchResponse:
        """Fetch the raw feed text for *source*.

        Raises:
            FetchError: If the endpoint cannot be reached or reports a failure.
        """
        ...  # pragma: no cover
