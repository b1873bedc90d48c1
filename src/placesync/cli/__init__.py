"""Command-line interface for placesync."""

from __future__ import annotations

import asyncio as asyncio
import logging as logging
import sys as sys

from placesync import ConfigError as ConfigError
from placesync import PlaceSync as PlaceSync
from placesync import load_config as load_config
from placesync.cli.app import main as main
from placesync.cli.commands import edits as edits_command
from placesync.cli.commands import init as init_command
from placesync.cli.commands import parse as parse_command
from placesync.cli.commands import places as places_command
from placesync.cli.commands import status as status_command
from placesync.cli.commands import sync as sync_command
from placesync.cli.parser import _package_version as _package_version
from placesync.cli.parser import build_parser as build_parser
from placesync.config import scaffold_config as scaffold_config
from placesync.config import source_from_url as source_from_url
from placesync.config import write_config as write_config
from placesync.feeds import classify_url

_format_summary = sync_command.format_sync_summary

_run_init = init_command.run_init
_run_init_defaults = init_command.run_init_defaults
_run_init_interactive = init_command.run_init_interactive
_run_sync = sync_command.run_sync
_run_test = sync_command.run_test
_run_status = status_command.run_status
_run_places = places_command.run_places
_run_edits = edits_command.run_edits
_run_parse = parse_command.run_parse


def _validate_share_url(value: str) -> bool | str:
    candidate = value.strip()
    if not candidate:
        return "Share URL is required"
    try:
        classify_url(candidate)
    except ConfigError:
        return "Use a My Maps URL (…?mid=…) or a saved-list URL (…!1s…)"
    return True
