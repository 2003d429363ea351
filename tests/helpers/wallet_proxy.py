"""Builders for wallet-proxy payloads shared by the tests."""

from typing import Any

OWNED_A = "3kBx2h5Y2veb4hZgAJWPrr8RyQESKm5TjzF3ti1QQ4VSYLwK1G"
OWNED_B = "4ZJBYQbVp3zVZyjCXfZAAYBVkJMyVj8UKUNj9ox5YqTCBdBq2M"
STRANGER = "3ybJ66spZ2xdWF3avgxQb2meouYa7mpvMWNPmUnczU8FoF8cGB"

BLOCK_TIME = 1700000000.5  # 2023-11-14 22:13:20 UTC


def raw_tx(
    tx_id: int,
    *,
    block_time: float = BLOCK_TIME,
    details: Any = None,
    cost: str | None = None,
    subtotal: str | None = None,
    total: str | None = None,
    tx_hash: str | None = "auto",
) -> dict[str, Any]:
    """Wallet-proxy JSON for one transaction."""
    data: dict[str, Any] = {
        "id": tx_id,
        "blockTime": block_time,
        "details": details if details is not None else {"type": "paydayAccountReward"},
    }
    if tx_hash == "auto":
        tx_hash = f"{tx_id:064x}"
    if tx_hash is not None:
        data["transactionHash"] = tx_hash
    for key, value in (("cost", cost), ("subtotal", subtotal), ("total", total)):
        if value is not None:
            data[key] = value
    return data


def transfer_details(source: str, destination: str, amount: str = "1000000") -> dict[str, Any]:
    return {
        "type": "transfer",
        "description": "Transfer",
        "transferSource": source,
        "transferDestination": destination,
        "transferAmount": amount,
        "outcome": "success",
    }
