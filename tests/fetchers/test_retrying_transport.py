from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from placesync.fetchers._retrying_transport import RetryingTransport

_SLEEP_BACKOFF = "placesync.fetchers._retrying_transport.RetryingTransport._sleep_backoff"
_SLEEP = "placesync.fetchers._retrying_transport.asyncio.sleep"


def _request() -> httpx.Request:
    return httpx.Request("POST", "http://proxy.test/.netlify/functions/fetch-mymaps-kml")


class _Scripted(httpx.AsyncBaseTransport):
    def __init__(self, outcomes: list[int | Exception], headers: dict[str, str] | None = None) -> None:
        self.outcomes = list(outcomes)
        self.headers = headers or {}
        self.calls = 0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome, headers=self.headers, request=request)


@pytest.mark.asyncio
async def test_success_is_returned_without_retry() -> None:
    inner = _Scripted([200])

    with patch(_SLEEP_BACKOFF, new_callable=AsyncMock) as backoff:
        response = await RetryingTransport(transport=inner).handle_async_request(_request())

    assert response.status_code == 200
    assert inner.calls == 1
    backoff.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [429, 502, 503, 504])
async def test_transient_statuses_are_retried(status: int) -> None:
    inner = _Scripted([status, 200])

    with patch(_SLEEP_BACKOFF, new_callable=AsyncMock) as backoff:
        response = await RetryingTransport(transport=inner, max_retries=3).handle_async_request(_request())

    assert response.status_code == 200
    assert inner.calls == 2
    backoff.assert_awaited_once_with(0)


@pytest.mark.asyncio
async def test_non_transient_error_is_not_retried() -> None:
    inner = _Scripted([404])

    with patch(_SLEEP_BACKOFF, new_callable=AsyncMock):
        response = await RetryingTransport(transport=inner).handle_async_request(_request())

    assert response.status_code == 404
    assert inner.calls == 1


@pytest.mark.asyncio
async def test_exhausted_retries_return_last_response() -> None:
    inner = _Scripted([503, 503, 503])

    with patch(_SLEEP_BACKOFF, new_callable=AsyncMock) as backoff:
        response = await RetryingTransport(transport=inner, max_retries=2).handle_async_request(_request())

    assert response.status_code == 503
    assert inner.calls == 3
    assert backoff.await_count == 2


@pytest.mark.asyncio
async def test_transport_errors_are_retried_then_raised() -> None:
    inner = _Scripted([httpx.ConnectError("refused"), httpx.ReadTimeout("slow")])

    with patch(_SLEEP_BACKOFF, new_callable=AsyncMock):
        with pytest.raises(httpx.ReadTimeout):
            await RetryingTransport(transport=inner, max_retries=1).handle_async_request(_request())

    assert inner.calls == 2


@pytest.mark.asyncio
async def test_retry_after_header_is_honoured_and_capped() -> None:
    inner = _Scripted([429, 200], headers={"Retry-After": "120"})

    with patch(_SLEEP_BACKOFF, new_callable=AsyncMock), patch(_SLEEP, new_callable=AsyncMock) as sleep:
        await RetryingTransport(transport=inner).handle_async_request(_request())

    sleep.assert_awaited_once_with(30.0)


@pytest.mark.asyncio
async def test_backoff_logs_attempt(caplog: pytest.LogCaptureFixture) -> None:
    with patch(_SLEEP, new_callable=AsyncMock):
        await RetryingTransport._sleep_backoff(1)

    assert "Retrying feed request (attempt 2)" in caplog.text


def test_parse_retry_after_defaults() -> None:
    assert RetryingTransport._parse_retry_after(httpx.Response(429)) == 0.0
    assert RetryingTransport._parse_retry_after(httpx.Response(429, headers={"Retry-After": "soon"})) == 0.0
    assert RetryingTransport._parse_retry_after(httpx.Response(429, headers={"Retry-After": "2.5"})) == 2.5
