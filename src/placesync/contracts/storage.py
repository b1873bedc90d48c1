"""Durable key/blob storage contract."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Whole-blob storage keyed by logical store name.

    Implementations raise :class:`~placesync.contracts.exceptions.StorageError`
    when the underlying medium fails.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None: ...  # pragma: no cover

    @abstractmethod
    async def set(self, key: str, value: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def remove(self, key: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def clear(self) -> None: ...  # pragma: no cover
