"""Config file loading."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from placesync.contracts.config import PlaceSyncConfig
from placesync.contracts.exceptions import ConfigError

ENDPOINT_ENV = "PLACESYNC_ENDPOINT"
STORAGE_DIR_ENV = "PLACESYNC_STORAGE_DIR"
DEFAULT_CONFIG_PATH = Path("placesync.json")


def _resolve_path(path: Path, *, base_dir: Path) -> Path:
    expanded = path.expanduser()
    if expanded.is_absolute():
        return expanded
    return (base_dir / expanded).resolve()


def load_config(path: str | Path, *, environ: Mapping[str, str] | None = None) -> PlaceSyncConfig:
    """Load and validate config from JSON, resolving relative paths against the config directory.

    ``PLACESYNC_ENDPOINT`` and ``PLACESYNC_STORAGE_DIR`` override the file's
    ``endpoint_base_url`` and ``storage_dir``.
    """
    config_path = Path(path).expanduser().resolve()
    config_dir = config_path.parent
    env = os.environ if environ is None else environ

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        parsed = PlaceSyncConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    updates: dict[str, Any] = {
        "feeds_dir": _resolve_path(parsed.feeds_dir, base_dir=config_dir),
        "storage_dir": _resolve_path(parsed.storage_dir, base_dir=config_dir),
    }
    if endpoint := env.get(ENDPOINT_ENV):
        updates["endpoint_base_url"] = endpoint
    if storage_dir := env.get(STORAGE_DIR_ENV):
        updates["storage_dir"] = _resolve_path(Path(storage_dir), base_dir=Path.cwd())
    return parsed.model_copy(update=updates)
