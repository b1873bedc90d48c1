"""Progress reporting protocol for the sync pipeline.

The orchestrator emits one lifecycle per phase (connecting, fetching,
parsing, processing, completing); consumers such as the CLI's Rich progress
display implement ``SyncProgress`` to render it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from placesync.contracts.sync import SyncPhase


class SyncProgress(ABC):
    """Observer interface for sync pipeline progress events."""

    def source_start(self, source_id: str, source_name: str) -> None:
        """A sync of *source_id* is about to begin."""

    @abstractmethod
    def phase_start(self, phase: SyncPhase, total: int | None = None) -> None:
        """A sync phase is starting. *total* is ``None`` for indeterminate phases."""
        ...  # pragma: no cover

    @abstractmethod
    def item_done(self, phase: SyncPhase) -> None:
        """One item within *phase* has completed."""
        ...  # pragma: no cover

    @abstractmethod
    def phase_done(self, phase: SyncPhase) -> None:
        """The *phase* has finished successfully."""
        ...  # pragma: no cover

    @abstractmethod
    def phase_error(self, phase: SyncPhase, error: BaseException) -> None:
        """The *phase* was interrupted by *error*."""
        ...  # pragma: no cover


class NullSyncProgress(SyncProgress):
    """No-op implementation used when no progress display is requested."""

    def phase_start(self, phase: SyncPhase, total: int | None = None) -> None:
        pass

    def item_done(self, phase: SyncPhase) -> None:
        pass

    def phase_done(self, phase: SyncPhase) -> None:
        pass

    def phase_error(self, phase: SyncPhase, error: BaseException) -> None:
        pass
