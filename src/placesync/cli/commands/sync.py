"""Sync and connection-test commands."""

from __future__ import annotations

import argparse

from placesync import PlaceSyncConfig, SyncResult
from placesync.cli.common import format_timestamp, plural
from placesync.cli.progress.rich import RichSyncProgress

EXIT_FETCH_FAILED = 4


def format_sync_summary(results: list[SyncResult], config: PlaceSyncConfig) -> str:
    succeeded = [result for result in results if result.success]
    lines = [
        "",
        f"placesync - sync complete ({len(succeeded)}/{plural(len(results), 'source')} succeeded)",
        "",
    ]

    for result in results:
        title = result.source_name or result.source_id
        if not result.success:
            lines.append(f"  {title}: failed")
            lines.append(f"    Error:      {result.error}")
            continue
        lines.append(f"  {title}: {result.places_found} found")
        lines.append(f"    Added:      {result.places_added}")
        lines.append(f"    Duplicates: {result.duplicates_skipped}")
        if result.verification is not None and not result.verification.counts_match:
            lines.append(
                f"    Warning:    store grew by {result.verification.actual_added}, "
                f"expected {result.places_added}"
            )
        lines.append(f"    Synced at:  {format_timestamp(result.synced_at)}")

    lines.append("")
    lines.append(f"  Storage:    {config.storage_dir}")
    lines.append("")
    return "\n".join(lines)


async def run_sync(args: argparse.Namespace) -> int:
    import placesync.cli as cli

    config = cli.load_config(args.config)

    if not args.verbose:
        with RichSyncProgress() as progress:
            async with cli.PlaceSync.from_config(config, progress=progress) as app:
                results = await app.sync_all() if args.all else [await app.sync(args.source)]
    else:
        async with cli.PlaceSync.from_config(config) as app:
            results = await app.sync_all() if args.all else [await app.sync(args.source)]

    print(cli._format_summary(results, config))
    return 0 if all(result.success for result in results) else EXIT_FETCH_FAILED


async def run_test(args: argparse.Namespace) -> int:
    import placesync.cli as cli

    config = cli.load_config(args.config)
    async with cli.PlaceSync.from_config(config) as app:
        result = await app.test_connection(args.source)

    if result.success:
        print(f"{result.source_name}: connection OK")
        return 0
    print(f"{result.source_name}: connection failed: {result.error}")
    return EXIT_FETCH_FAILED


__all__ = ["format_sync_summary", "run_sync", "run_test"]
