"""Tests for the wallet-proxy page fetcher."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from src.parsers.wallet_proxy.client import MAX_RETRIES, WalletProxyClient
from src.parsers.wallet_proxy.exceptions import FetchError
from tests.helpers.wallet_proxy import OWNED_A, raw_tx


def _resp(status_code: int = 200, payload: object = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


def _client(*responses: object) -> WalletProxyClient:
    client = WalletProxyClient(max_rps=0)
    client._client = AsyncMock()
    client._client.get = AsyncMock(side_effect=list(responses))
    return client


class TestFetchPage:
    @pytest.mark.asyncio
    async def test_first_page_request(self) -> None:
        client = _client(
            _resp(payload={"count": 2, "limit": 2, "transactions": [raw_tx(11), raw_tx(10)]})
        )

        page = await client.fetch_page(OWNED_A, limit=2)

        client._client.get.assert_awaited_once_with(
            f"/v1/accTransactions/{OWNED_A}",
            params={"limit": 2, "order": "descending"},
        )
        assert [tx.id for tx in page.transactions] == [11, 10]
        assert page.has_more is True
        assert page.cursor == 10

    @pytest.mark.asyncio
    async def test_cursor_sent_as_from(self) -> None:
        client = _client(_resp(payload={"count": 1, "limit": 5, "transactions": [raw_tx(3)]}))

        page = await client.fetch_page(OWNED_A, limit=5, cursor=4)

        _, kwargs = client._client.get.call_args
        assert kwargs["params"] == {"limit": 5, "order": "descending", "from": 4}
        assert page.has_more is False

    @pytest.mark.asyncio
    async def test_non_positive_limit(self) -> None:
        client = _client()
        with pytest.raises(ValueError):
            await client.fetch_page(OWNED_A, limit=0)
        client._client.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rate_limit_retry(self) -> None:
        """Client retries on 429."""
        client = _client(
            _resp(429),
            _resp(payload={"count": 0, "limit": 100, "transactions": []}),
        )
        with patch("src.parsers.wallet_proxy.client.asyncio.sleep", new=AsyncMock()):
            page = await client.fetch_page(OWNED_A)
        assert page.transactions == []
        assert client._client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_server_error_exhausts_retries(self) -> None:
        client = _client(*[_resp(503) for _ in range(MAX_RETRIES + 1)])
        with patch("src.parsers.wallet_proxy.client.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(FetchError) as exc_info:
                await client.fetch_page(OWNED_A)
        assert exc_info.value.account == OWNED_A
        assert client._client.get.await_count == MAX_RETRIES + 1

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self) -> None:
        client = _client(_resp(404))
        with pytest.raises(FetchError, match="HTTP 404"):
            await client.fetch_page(OWNED_A)
        assert client._client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_timeout_then_success(self) -> None:
        client = _client(
            httpx.TimeoutException("timeout"),
            _resp(payload={"count": 0, "limit": 100, "transactions": []}),
        )
        with patch("src.parsers.wallet_proxy.client.asyncio.sleep", new=AsyncMock()):
            page = await client.fetch_page(OWNED_A)
        assert page.has_more is False

    @pytest.mark.asyncio
    async def test_persistent_connect_error(self) -> None:
        client = _client(*[httpx.ConnectError("refused") for _ in range(MAX_RETRIES + 1)])
        with patch("src.parsers.wallet_proxy.client.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(FetchError) as exc_info:
                await client.fetch_page(OWNED_A)
        assert exc_info.value.account == OWNED_A

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        resp = _resp()
        resp.json.side_effect = ValueError("Expecting value")
        client = _client(resp)
        with pytest.raises(FetchError, match="not valid JSON"):
            await client.fetch_page(OWNED_A)

    @pytest.mark.asyncio
    async def test_malformed_page(self) -> None:
        client = _client(_resp(payload={"transactions": "nope"}))
        with pytest.raises(FetchError, match="malformed page"):
            await client.fetch_page(OWNED_A)

    @pytest.mark.asyncio
    async def test_context_manager_closes(self) -> None:
        client = _client()
        client._client.aclose = AsyncMock()
        async with client:
            pass
        client._client.aclose.assert_awaited_once()
