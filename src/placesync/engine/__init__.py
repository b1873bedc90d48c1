"""Sync orchestration, status tracking and progress reporting."""

from placesync.engine.orchestrator import SyncOrchestrator
from placesync.engine.progress import NullSyncProgress, SyncProgress
from placesync.engine.status import SyncStatusTracker

__all__ = ["NullSyncProgress", "SyncOrchestrator", "SyncProgress", "SyncStatusTracker"]
