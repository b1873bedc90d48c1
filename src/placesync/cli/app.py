"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys
from collections.abc import Awaitable, Callable
from typing import Any

from placesync import ConfigError, FetchError, FormatError, PlaceSyncError, StorageError, SyncError


def _handler(args: Any) -> Callable[[Any], Awaitable[int]]:
    import placesync.cli as cli

    handlers: dict[str, Callable[[Any], Awaitable[int]]] = {
        "sync": cli._run_sync,
        "test": cli._run_test,
        "status": cli._run_status,
        "places": cli._run_places,
        "edits": cli._run_edits,
    }
    return handlers[args.command]


def main(argv: list[str] | None = None) -> int:
    import placesync.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        return cli._run_init(args)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)

    try:
        if args.command == "parse":
            return cli._run_parse(args)
        return cli.asyncio.run(_handler(args)(args))
    except (ConfigError, FormatError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except FetchError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except (SyncError, StorageError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except PlaceSyncError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:  # pragma: no cover
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
