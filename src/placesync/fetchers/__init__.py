"""Feed fetchers: the HTTP proxy client and the local-file reader."""

from placesync.fetchers.factory import available_fetchers, create_fetcher, register
from placesync.fetchers.file import FileFeedFetcher
from placesync.fetchers.http import HttpFeedFetcher

__all__ = ["FileFeedFetcher", "HttpFeedFetcher", "available_fetchers", "create_fetcher", "register"]
