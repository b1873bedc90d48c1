"""Status command."""

from __future__ import annotations

import argparse

from placesync import ConfigNotFoundError, SyncStatus
from placesync.cli.common import format_timestamp


def format_status_line(status: SyncStatus, *, name: str, history_length: int, last_sync: str) -> str:
    message = f" - {status.message}" if status.message else ""
    return f"  {name:<24} {status.status.value:<10} last sync: {last_sync}  history: {history_length}{message}"


async def run_status(args: argparse.Namespace) -> int:
    import placesync.cli as cli

    config = cli.load_config(args.config)
    sources = config.sources
    if args.source is not None:
        source = config.get_source(args.source)
        if source is None:
            raise ConfigNotFoundError(args.source)
        sources = [source]

    async with cli.PlaceSync.from_config(config) as app:
        if args.clear:
            for source in sources:
                await app.tracker.clear_history(source.id)
                print(f"Cleared sync history for {source.name}")
            return 0

        lines = ["", "placesync - sync status", ""]
        for source in sources:
            history = await app.tracker.get_history(source.id)
            last_sync = await app.tracker.get_last_sync_time(source.id)
            lines.append(
                format_status_line(
                    await app.tracker.latest_status(source.id),
                    name=source.name,
                    history_length=len(history),
                    last_sync=format_timestamp(last_sync),
                )
            )
        lines.append("")
        lines.append(f"  Places:     {len(app.store.get_effective_places())}")
        lines.append(f"  Last sync:  {format_timestamp(app.store.last_sync_at)}")
        lines.append("")
    print("\n".join(lines))
    return 0


__all__ = ["format_status_line", "run_status"]
