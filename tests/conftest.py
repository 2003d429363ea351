"""Shared test fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from src.parsers.wallet_proxy.models import AccountTransaction, TransactionPage
from tests.helpers.wallet_proxy import raw_tx


@pytest.fixture
def make_tx() -> Callable[..., AccountTransaction]:
    def _make(tx_id: int, **kwargs: Any) -> AccountTransaction:
        return AccountTransaction.model_validate(raw_tx(tx_id, **kwargs))

    return _make


@pytest.fixture
def make_page() -> Callable[..., TransactionPage]:
    def _make(
        transactions: list[AccountTransaction], limit: int = 100, count: int | None = None
    ) -> TransactionPage:
        return TransactionPage(
            count=len(transactions) if count is None else count,
            limit=limit,
            transactions=transactions,
        )

    return _make
