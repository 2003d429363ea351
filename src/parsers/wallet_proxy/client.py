"""Concordium wallet-proxy client — account transaction history, one page per call.

The wallet-proxy lists transactions newest first. Passing the id of the last
(oldest) transaction seen as `from` returns the next older page.
Retry with backoff for transient errors (timeout, connect, 429, 5xx).
"""

import asyncio
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from src.parsers.rate_limiter import RateLimiter
from src.parsers.wallet_proxy.exceptions import FetchError
from src.parsers.wallet_proxy.models import TransactionPage

DEFAULT_BASE_URL = "https://wallet-proxy.mainnet.concordium.software"
DEFAULT_PAGE_LIMIT = 100
MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]


class WalletProxyClient:
    """Async HTTP client for the wallet-proxy transaction endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        rate_limiter: RateLimiter | None = None,
        max_rps: float = 5.0,
        timeout: float = 15.0,
    ) -> None:
        self._rate_limiter = rate_limiter or RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "WalletProxyClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, account: str, path: str, params: dict[str, Any]) -> Any:
        """Rate-limited GET with retry. Any final failure is a FetchError for `account`."""
        for attempt in range(MAX_RETRIES + 1):
            await self._rate_limiter.acquire()
            try:
                resp = await self._client.get(path, params=params)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(
                        f"[WALLET_PROXY] {type(e).__name__}, retry {attempt + 1} in {delay}s: {path}"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise FetchError(
                    account, f"request failed after {MAX_RETRIES + 1} attempts: {e}"
                ) from e
            except httpx.RequestError as e:
                raise FetchError(account, f"request failed: {e}") from e

            if resp.status_code == 429 or resp.status_code >= 500:
                if attempt < MAX_RETRIES:
                    delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                    logger.debug(
                        f"[WALLET_PROXY] HTTP {resp.status_code}, retry {attempt + 1} in {delay}s: {path}"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise FetchError(account, f"HTTP {resp.status_code} after {MAX_RETRIES + 1} attempts")

            if resp.status_code != 200:
                raise FetchError(account, f"HTTP {resp.status_code}")

            try:
                return resp.json()
            except ValueError as e:
                raise FetchError(account, "response body is not valid JSON") from e

        raise FetchError(account, "request failed after retries")

    async def fetch_page(
        self,
        account: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        cursor: int | None = None,
    ) -> TransactionPage:
        """Fetch up to `limit` transactions of `account` older than `cursor`.

        Without a cursor the most recent `limit` transactions are returned.
        """
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        params: dict[str, Any] = {"limit": limit, "order": "descending"}
        if cursor is not None:
            params["from"] = cursor

        data = await self._get(account, f"/v1/accTransactions/{account}", params)
        try:
            page = TransactionPage.model_validate(data)
        except ValidationError as e:
            raise FetchError(account, f"malformed page ({e.error_count()} errors)") from e

        logger.debug(
            f"[WALLET_PROXY] {account[:12]} from={cursor} "
            f"count={page.count} limit={page.limit}"
        )
        return page
