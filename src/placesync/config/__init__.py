"""Config loading and scaffolding."""

from placesync.config.loader import DEFAULT_CONFIG_PATH, ENDPOINT_ENV, STORAGE_DIR_ENV, load_config
from placesync.config.scaffold import (
    DEFAULT_SOURCES,
    scaffold_config,
    source_from_url,
    source_id_from_name,
    write_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_SOURCES",
    "ENDPOINT_ENV",
    "STORAGE_DIR_ENV",
    "load_config",
    "scaffold_config",
    "source_from_url",
    "source_id_from_name",
    "write_config",
]
