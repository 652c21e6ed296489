"""Tests for the shared request and retry logic of API clients."""

# Standard library imports
import asyncio
import logging
from typing import Any

# Third-party imports
import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

# Local imports
from tidewaves.clients.base import MAX_ERROR_BODY, BaseApiClient
from tidewaves.errors import DecodingError, ProviderError, TransportError


class DummyApi(BaseApiClient):
    @property
    def client_type(self) -> str:
        return "dummy"


def make_session(status: int = 200, body: str = "{}") -> MagicMock:
    """Mock session whose get() yields a response with the given status and body."""
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=body)
    session = MagicMock(spec=aiohttp.ClientSession)
    session.get.return_value.__aenter__.return_value = response
    return session


@pytest.mark.asyncio
async def test_execute_request_decodes_json() -> None:
    session = make_session(body='{"predictions": [{"t": "2025-04-19 00:00", "v": "1.0"}]}')
    client = DummyApi(session)

    payload = await client._execute_request(
        "https://example.com/api", {"a": 1}, {"User-Agent": "test"}
    )

    assert payload == {"predictions": [{"t": "2025-04-19 00:00", "v": "1.0"}]}
    session.get.assert_called_once_with(
        "https://example.com/api", params={"a": 1}, headers={"User-Agent": "test"}
    )


@pytest.mark.asyncio
async def test_execute_request_http_error_truncates_body() -> None:
    body = "x" * (MAX_ERROR_BODY * 2)
    client = DummyApi(make_session(status=503, body=body))

    with pytest.raises(ProviderError) as exc_info:
        await client._execute_request("https://example.com/api", {})

    message = exc_info.value.message
    assert message.startswith("HTTP error 503: ")
    assert message.count("x") == MAX_ERROR_BODY


@pytest.mark.asyncio
async def test_execute_request_invalid_json() -> None:
    client = DummyApi(make_session(body="<html>not json</html>"))

    with pytest.raises(DecodingError):
        await client._execute_request("https://example.com/api", {})


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()]
)
async def test_execute_request_transport_error(error: Exception) -> None:
    session = MagicMock(spec=aiohttp.ClientSession)
    session.get.side_effect = error
    client = DummyApi(session)

    with pytest.raises(TransportError):
        await client._execute_request("https://example.com/api", {})


@pytest.mark.asyncio
async def test_request_with_retry_recovers() -> None:
    client = DummyApi(MagicMock(spec=aiohttp.ClientSession), max_retries=3, retry_delay=0)
    with patch.object(
        client, "_execute_request", new_callable=AsyncMock
    ) as mock_request:
        mock_request.side_effect = [TransportError("flaky"), {"ok": True}]
        result = await client.request_with_retry("https://example.com/api", {})

    assert result == {"ok": True}
    assert mock_request.call_count == 2


@pytest.mark.asyncio
async def test_request_with_retry_backoff() -> None:
    client = DummyApi(MagicMock(spec=aiohttp.ClientSession), max_retries=3, retry_delay=2)
    with patch.object(
        client, "_execute_request", new_callable=AsyncMock
    ) as mock_request, patch(
        "tidewaves.clients.base.asyncio.sleep", new_callable=AsyncMock
    ) as mock_sleep:
        mock_request.side_effect = TransportError("down")
        with pytest.raises(TransportError):
            await client.request_with_retry("https://example.com/api", {})

    assert mock_request.call_count == 3
    assert [c.args[0] for c in mock_sleep.call_args_list] == [2, 4]


@pytest.mark.asyncio
async def test_request_with_retry_does_not_retry_decoding_errors() -> None:
    client = DummyApi(MagicMock(spec=aiohttp.ClientSession), retry_delay=0)
    with patch.object(
        client, "_execute_request", new_callable=AsyncMock
    ) as mock_request:
        mock_request.side_effect = DecodingError("bad")
        with pytest.raises(DecodingError):
            await client.request_with_retry("https://example.com/api", {})

    assert mock_request.call_count == 1


def test_log_prefix(caplog: Any) -> None:
    client = DummyApi(MagicMock(spec=aiohttp.ClientSession))
    with caplog.at_level(logging.INFO):
        client.log("hello", tag="nyc")
        client.log("world")

    assert "[nyc][dummy] hello" in caplog.messages
    assert "[dummy] world" in caplog.messages
