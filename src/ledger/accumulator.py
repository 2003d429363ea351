"""Merged, deduplicated, time-ordered transaction set.

Two parts: a dict keyed by transaction id for O(1) duplicate checks and a
list kept sorted by (block_time, id) for emission order. A NaN block time
sorts after every finite one so it cannot scramble the rest. Merging a page
that overlaps earlier pages (retries, shared transfers between owned
accounts) never produces duplicates.
"""

import asyncio
import bisect
import math
from collections.abc import Iterable, Iterator

from src.parsers.wallet_proxy.models import AccountTransaction


def _order_key(tx: AccountTransaction) -> tuple[bool, float, int]:
    # NaN compares false both ways and would break the sort; park it at the end.
    unordered = math.isnan(tx.block_time)
    return (unordered, 0.0 if unordered else tx.block_time, tx.id)


class LedgerAccumulator:
    """Ordered-unique set of transactions, uniqued by id, sorted by block time."""

    def __init__(self, transactions: Iterable[AccountTransaction] = ()) -> None:
        self._by_id: dict[int, AccountTransaction] = {}
        self._ordered: list[AccountTransaction] = []
        self._lock = asyncio.Lock()
        self.merge(transactions)

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[AccountTransaction]:
        return iter(tuple(self._ordered))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, AccountTransaction):
            return item.id in self._by_id
        return item in self._by_id

    @property
    def transactions(self) -> tuple[AccountTransaction, ...]:
        """Snapshot in ascending (block_time, id) order."""
        return tuple(self._ordered)

    def merge(self, page: Iterable[AccountTransaction]) -> int:
        """Insert unseen transactions. Returns how many were new."""
        added = 0
        for tx in page:
            if tx.id in self._by_id:
                continue
            self._by_id[tx.id] = tx
            bisect.insort(self._ordered, tx, key=_order_key)
            added += 1
        return added

    async def merge_page(self, page: Iterable[AccountTransaction]) -> int:
        """Merge under a lock so concurrent account drains serialize writes."""
        async with self._lock:
            return self.merge(page)


def merge(
    existing: LedgerAccumulator, page: Iterable[AccountTransaction]
) -> LedgerAccumulator:
    """Functional merge: returns a new accumulator, `existing` is untouched."""
    merged = LedgerAccumulator(existing.transactions)
    merged.merge(page)
    return merged
