"""Drop CCD moved between the caller's own accounts.

Such transfers are neither a disposal nor an acquisition. A transfer with
only one owned side is a real inflow/outflow and is kept.
"""

from collections.abc import Collection, Iterable

from src.parsers.wallet_proxy.models import AccountTransaction, TransferDetails


def is_self_transfer(tx: AccountTransaction, owned_accounts: Collection[str]) -> bool:
    details = tx.details
    return (
        isinstance(details, TransferDetails)
        and details.transfer_source in owned_accounts
        and details.transfer_destination in owned_accounts
    )


def filter_self_transfers(
    transactions: Iterable[AccountTransaction],
    owned_accounts: Collection[str],
) -> list[AccountTransaction]:
    """Return `transactions` without self-transfers, order preserved."""
    owned = frozenset(owned_accounts)
    return [tx for tx in transactions if not is_self_transfer(tx, owned)]
