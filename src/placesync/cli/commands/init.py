"""Init command handlers."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any


def run_init(args: argparse.Namespace) -> int:
    """Run the init wizard or defaults mode."""
    output = Path(args.output)

    if output.exists():
        if args.defaults:
            print(f"error: {output} already exists (use a different --output path)", file=sys.stderr)
            return 2
        try:
            import questionary

            if not questionary.confirm(f"{output} already exists. Overwrite?", default=False).ask():
                print("Aborted.")
                return 2
        except KeyboardInterrupt:
            print("\nAborted.")
            return 2

    if args.defaults:
        return run_init_defaults(output)
    return run_init_interactive(output)


def run_init_defaults(output: Path) -> int:
    """Generate a config with the built-in shared maps, no prompts."""
    import placesync.cli as cli

    try:
        config = cli.scaffold_config(include_defaults=True)
    except cli.ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3

    cli.write_config(config, output)
    print(f"Config written to {output}")
    print("\nStart the feed proxy (or set PLACESYNC_ENDPOINT), then run:")
    print(f"  placesync sync --config {output} --all")
    return 0


def _ask_sources() -> list[dict[str, str]]:
    import questionary

    import placesync.cli as cli

    sources: list[dict[str, str]] = []
    while True:
        name = questionary.text("Source name:", validate=lambda v: len(v.strip()) > 0 or "Name is required").ask()
        if name is None:
            raise KeyboardInterrupt
        url = questionary.text("Share URL (My Maps or saved list):", validate=cli._validate_share_url).ask()
        if url is None:
            raise KeyboardInterrupt
        owner = questionary.text("Owner (optional):", default="").ask()
        if owner is None:
            raise KeyboardInterrupt
        sources.append(cli.source_from_url(url.strip(), name=name.strip(), owner=owner.strip() or None))

        more = questionary.confirm("Add another source?", default=False).ask()
        if more is None:
            raise KeyboardInterrupt
        if not more:
            return sources


def run_init_interactive(output: Path) -> int:
    """Run the interactive wizard using questionary."""
    import placesync.cli as cli

    try:
        import questionary
    except ImportError:  # pragma: no cover
        print("error: questionary is required for interactive init (pip install questionary)", file=sys.stderr)
        return 1

    try:
        fetcher = questionary.select(
            "Fetch feeds from:",
            choices=[
                questionary.Choice("Feed proxy endpoint (default)", value="http"),
                questionary.Choice("Local feed files", value="file"),
            ],
            default="http",
        ).ask()
        if fetcher is None:
            raise KeyboardInterrupt

        options: dict[str, Any] = {"fetcher": fetcher}
        if fetcher == "http":
            endpoint = questionary.text("Feed proxy base URL:", default="http://localhost:8888").ask()
            if endpoint is None:
                raise KeyboardInterrupt
            options["endpoint_base_url"] = endpoint.strip()
        else:
            feeds_dir = questionary.text("Feed directory:", default="feeds").ask()
            if feeds_dir is None:
                raise KeyboardInterrupt
            options["feeds_dir"] = feeds_dir.strip()

        storage_dir = questionary.text("Storage directory:", default=".placesync").ask()
        if storage_dir is None:
            raise KeyboardInterrupt
        options["storage_dir"] = storage_dir.strip()

        use_defaults = questionary.confirm("Use the built-in shared maps as sources?", default=True).ask()
        if use_defaults is None:
            raise KeyboardInterrupt
        if not use_defaults:
            options["sources"] = _ask_sources()

        history = questionary.text(
            "Sync history entries to keep per source (1-500):",
            default="50",
            validate=lambda v: v.isdigit() and 1 <= int(v) <= 500,
        ).ask()
        if history is None:
            raise KeyboardInterrupt
        options["history_limit"] = int(history)

        config = cli.scaffold_config(**options)
    except KeyboardInterrupt:
        print("\nAborted.")
        return 2
    except cli.ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3

    cli.write_config(config, output)
    print(f"\nConfig written to {output}")
    print(f"\nNext: placesync sync --config {output} --all")
    return 0


__all__ = ["run_init", "run_init_defaults", "run_init_interactive"]
