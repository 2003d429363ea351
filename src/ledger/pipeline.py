"""Export pipeline: fetch, accumulate, filter, transform.

All requested accounts are drained concurrently into one accumulator
(each account's pagination is sequential: the next cursor comes from the
previous page). Failures are isolated: a FetchError stops only its own
account, a TransformError skips only its own transaction.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger

from src.ledger.accumulator import LedgerAccumulator
from src.ledger.exceptions import TransformError
from src.ledger.filters import filter_self_transfers
from src.ledger.transform import DEFAULT_CURRENCY, ExportRow, to_rows
from src.parsers.wallet_proxy.client import DEFAULT_PAGE_LIMIT
from src.parsers.wallet_proxy.exceptions import FetchError
from src.parsers.wallet_proxy.models import AccountTransaction, TransactionPage


class PageFetcher(Protocol):
    async def fetch_page(
        self, account: str, limit: int = ..., cursor: int | None = ...
    ) -> TransactionPage: ...


@dataclass
class ExportResult:
    """Rows plus what was left out on the way."""

    rows: list[ExportRow] = field(default_factory=list)
    transactions_fetched: int = 0
    pages_fetched: int = 0
    self_transfers_excluded: int = 0
    skipped: dict[int, str] = field(default_factory=dict)  # tx id -> reason
    failed_accounts: dict[str, str] = field(default_factory=dict)  # account -> reason

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def is_partial(self) -> bool:
        return bool(self.skipped or self.failed_accounts)


async def drain_account(
    fetcher: PageFetcher,
    account: str,
    accumulator: LedgerAccumulator,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> int:
    """Page through `account` until a short or empty page. Returns pages fetched.

    Also stops when the next cursor is not older than the current one, since
    asking again would return the same page forever.
    FetchError propagates; pages merged before it stay in the accumulator.
    """
    cursor: int | None = None
    pages = 0
    while True:
        page = await fetcher.fetch_page(account, limit=limit, cursor=cursor)
        pages += 1
        added = await accumulator.merge_page(page.transactions)
        logger.debug(
            f"[LEDGER] {account[:12]} page {pages}: "
            f"{len(page.transactions)} txs, {added} new"
        )
        if not page.has_more:
            return pages
        next_cursor = page.cursor
        if cursor is not None and (next_cursor is None or next_cursor >= cursor):
            logger.warning(
                f"[LEDGER] {account[:12]} cursor did not advance "
                f"({cursor} -> {next_cursor}), stopping after {pages} pages"
            )
            return pages
        cursor = next_cursor


def build_rows(
    transactions: Sequence[AccountTransaction], currency: str = DEFAULT_CURRENCY
) -> tuple[list[ExportRow], dict[int, str]]:
    """Transform each transaction, collecting failures instead of raising."""
    rows: list[ExportRow] = []
    skipped: dict[int, str] = {}
    for tx in transactions:
        try:
            rows.extend(to_rows(tx, currency))
        except TransformError as e:
            logger.warning(f"[EXPORT] Skipping tx {e.tx_id}: {e.message}")
            skipped[e.tx_id] = e.message
    return rows, skipped


async def run_export(
    fetcher: PageFetcher,
    accounts: Sequence[str],
    *,
    limit: int = DEFAULT_PAGE_LIMIT,
    currency: str = DEFAULT_CURRENCY,
    concurrency: int = 4,
) -> ExportResult:
    """Drain all accounts and turn their combined history into export rows."""
    owned = list(dict.fromkeys(accounts))
    result = ExportResult()
    accumulator = LedgerAccumulator()
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _drain(account: str) -> None:
        async with semaphore:
            try:
                pages = await drain_account(fetcher, account, accumulator, limit)
            except FetchError as e:
                logger.warning(f"[LEDGER] Account {account} failed: {e.message}")
                result.failed_accounts[account] = e.message
                return
            result.pages_fetched += pages
            logger.info(f"[LEDGER] Account {account[:12]} drained ({pages} pages)")

    await asyncio.gather(*(_drain(account) for account in owned))

    result.transactions_fetched = len(accumulator)
    survivors = filter_self_transfers(accumulator.transactions, owned)
    result.self_transfers_excluded = result.transactions_fetched - len(survivors)

    result.rows, result.skipped = build_rows(survivors, currency)

    logger.info(
        f"[EXPORT] {result.transactions_fetched} txs, "
        f"{result.self_transfers_excluded} self-transfers excluded, "
        f"{len(result.rows)} rows, {result.skipped_count} skipped, "
        f"{len(result.failed_accounts)} accounts failed"
    )
    return result
