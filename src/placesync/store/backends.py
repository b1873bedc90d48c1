"""Storage backends for place and sync-history blobs."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path

from placesync.contracts.exceptions import StorageError
from placesync.contracts.storage import StorageBackend

_LOG = logging.getLogger(__name__)
_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_key(key: str) -> str:
    if not _KEY_RE.match(key) or key in {".", ".."}:
        raise StorageError(f"invalid storage key: {key!r}")
    return key


class MemoryStorageBackend(StorageBackend):
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.blobs.get(_check_key(key))

    async def set(self, key: str, value: str) -> None:
        self.blobs[_check_key(key)] = value

    async def remove(self, key: str) -> None:
        self.blobs.pop(_check_key(key), None)

    async def clear(self) -> None:
        self.blobs.clear()


class FileStorageBackend(StorageBackend):
    """One ``<key>.json`` file per key under *root*.

    Writes go to a temporary file in the same directory and are moved into
    place with :func:`os.replace`, so readers never observe a partial blob.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        return self._root / f"{_check_key(key)}.json"

    async def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return await asyncio.to_thread(_read_text, path)
        except OSError as exc:
            raise StorageError(f"failed reading {path}") from exc

    async def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(_write_text_atomic, path, value)
        except OSError as exc:
            raise StorageError(f"failed writing {path}") from exc
        _LOG.debug("Wrote %d bytes to %s", len(value), path)

    async def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            raise StorageError(f"failed removing {path}") from exc

    async def clear(self) -> None:
        try:
            await asyncio.to_thread(_remove_blobs, self._root)
        except OSError as exc:
            raise StorageError(f"failed clearing {self._root}") from exc


def _read_text(path: Path) -> str | None:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def _write_text_atomic(path: Path, value: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(value)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _remove_blobs(root: Path) -> None:
    if not root.is_dir():
        return
    for path in root.glob("*.json"):
        path.unlink(missing_ok=True)
