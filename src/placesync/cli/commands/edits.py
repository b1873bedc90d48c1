"""Edit export/import commands."""

from __future__ import annotations

import argparse
from pathlib import Path


async def run_edits(args: argparse.Namespace) -> int:
    import placesync.cli as cli

    config = cli.load_config(args.config)
    async with cli.PlaceSync.from_config(config) as app:
        if args.edits_command == "export":
            blob = app.store.export_edits()
            if args.output is None:
                print(blob)
            else:
                output = Path(args.output)
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_text(blob + "\n", encoding="utf-8")
                print(f"Exported {app.store.get_edit_statistics().total_edits} edits to {output}")
            return 0

        path = Path(args.path)
        try:
            blob = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise cli.ConfigError(f"failed reading edit export: {path}") from exc
        result = await app.store.import_edits(blob)
        print(result.message)
        return 0


__all__ = ["run_edits"]
