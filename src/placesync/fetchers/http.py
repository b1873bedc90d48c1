"""Fetcher that pulls feeds through the serverless proxy endpoints."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from placesync.contracts.config import SourceConfig, SourceFormat
from placesync.contracts.exceptions import FetchError
from placesync.contracts.fetcher import FeedFetcher, FetchResponse
from placesync.fetchers._retrying_transport import RetryingTransport

_LOG = logging.getLogger(__name__)

KML_FUNCTION_PATH = "/.netlify/functions/fetch-mymaps-kml"
LIST_FUNCTION_PATH = "/.netlify/functions/fetch-maps-list"
_PAYLOAD_KEYS = ("kmlContent", "listData", "content")


class HttpFeedFetcher(FeedFetcher):
    """POSTs the source's fetch id to the proxy and returns the raw feed text.

    Use as an async context manager; the underlying :class:`httpx.AsyncClient`
    only exists between ``__aenter__`` and ``__aexit__``.
    """

    def __init__(
        self,
        *,
        endpoint_base_url: str = "http://localhost:8888",
        request_timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = endpoint_base_url.rstrip("/")
        self._request_timeout = request_timeout
        self._max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HttpFeedFetcher:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            transport=RetryingTransport(transport=self._transport, max_retries=self._max_retries),
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(self._request_timeout),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise FetchError("Fetcher is not initialized. Use 'async with'.")
        return self._client

    async def fetch(self, source: SourceConfig) -> FetchResponse:
        client = self._require_client()
        if source.format == SourceFormat.MAPS_LIST:
            path, body = LIST_FUNCTION_PATH, {"listId": source.fetch_id}
        else:
            path, body = KML_FUNCTION_PATH, {"mapId": source.fetch_id}

        _LOG.debug("Fetching %s from %s%s", source.id, self._base_url, path)
        try:
            response = await client.post(path, json=body)
        except httpx.HTTPError as exc:
            raise FetchError("Network error", details=str(exc)) from exc

        data = _json_body(response)
        if response.is_error:
            raise FetchError(
                str(data.get("error") or f"Failed to fetch {source.name}"),
                details=str(data.get("details") or f"HTTP {response.status_code}"),
            )
        if not data.get("success"):
            raise FetchError(str(data.get("error") or f"Failed to fetch {source.name}"), details=_details(data))

        payload = next((data[key] for key in _PAYLOAD_KEYS if isinstance(data.get(key), str)), None)
        return FetchResponse(success=True, payload=payload)


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        if response.is_error:
            return {}
        raise FetchError("Feed endpoint returned a non-JSON body", details=f"HTTP {response.status_code}") from exc
    return data if isinstance(data, dict) else {}


def _details(data: dict[str, Any]) -> str | None:
    details = data.get("details")
    return None if details is None else str(details)
