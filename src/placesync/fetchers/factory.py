"""Factory for creating feed fetchers by name.

The CLI and SDK pick a fetcher from ``PlaceSyncConfig.fetcher`` without
importing the concrete classes.
"""

from __future__ import annotations

from collections.abc import Callable

from placesync.contracts.config import PlaceSyncConfig
from placesync.contracts.exceptions import ConfigError
from placesync.contracts.fetcher import FeedFetcher
from placesync.fetchers.file import FileFeedFetcher
from placesync.fetchers.http import HttpFeedFetcher

FetcherBuilder = Callable[[PlaceSyncConfig], FeedFetcher]

# Registry mapping fetcher names to builders
_REGISTRY: dict[str, FetcherBuilder] = {}


def register(name: str, builder: FetcherBuilder) -> None:
    """Register a fetcher builder by name.

    Args:
        name: Fetcher name (e.g. "http").
        builder: Callable that turns a config into a :class:`FeedFetcher`.
    """
    _REGISTRY[name] = builder


def available_fetchers() -> list[str]:
    return sorted(_REGISTRY)


def create_fetcher(name: str, config: PlaceSyncConfig) -> FeedFetcher:
    """Create a fetcher instance by name.

    The returned fetcher is an async context manager::

        async with create_fetcher("http", config) as fetcher:
            response = await fetcher.fetch(source)

    Raises:
        ConfigError: If the fetcher name is not registered.
    """
    builder = _REGISTRY.get(name)
    if builder is None:
        available = ", ".join(available_fetchers()) or "(none registered)"
        raise ConfigError(f"Unknown fetcher: {name!r}. Available: {available}")
    return builder(config)


register(
    "http",
    lambda config: HttpFeedFetcher(
        endpoint_base_url=config.endpoint_base_url,
        request_timeout=config.request_timeout,
        max_retries=config.max_retries,
    ),
)
register("file", lambda config: FileFeedFetcher(config.feeds_dir))
