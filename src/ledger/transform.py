"""Turn one wallet-proxy transaction into 0..2 export rows.

Principal row: subtotal (or total) in CCD, labelled `mining` for payday
rewards. Fee row: minus cost, labelled `fee`. When the whole net effect is
the fee (|total| == cost, e.g. a rejected transaction or a delegation
change) only the fee row is emitted.

Subtotal wins for the principal row even when it differs from
total - cost; the fee row is computed from cost alone. Rows then need
not sum to total.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from src.ledger.exceptions import MissingAmountError, TimestampConversionError
from src.parsers.wallet_proxy.models import AccountTransaction, PaydayRewardDetails

MICRO_CCD_PER_CCD = 1_000_000
DEFAULT_CURRENCY = "CCD"
DATE_FORMAT = "%Y-%m-%d %H:%M UTC"


class RowLabel(str, Enum):
    FEE = "fee"
    MINING = "mining"


@dataclass(frozen=True)
class ExportRow:
    """One line of the tax-reporting CSV."""

    date: str
    amount: float  # CCD, signed
    currency: str = DEFAULT_CURRENCY
    label: RowLabel | None = None
    tx_hash: str | None = None

    def to_csv_row(self) -> dict[str, str]:
        return {
            "Date": self.date,
            "Amount": format_amount(self.amount),
            "Currency": self.currency,
            "Label": self.label.value if self.label else "",
            "TxHash": self.tx_hash or "",
        }


def to_ccd(micro_ccd: int) -> float:
    return micro_ccd / MICRO_CCD_PER_CCD


def format_amount(amount: float) -> str:
    """Fixed-point with at most 6 decimals (microCCD precision), no exponent."""
    text = f"{amount:.6f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_block_time(block_time: float, tx_id: int = 0) -> str:
    if not math.isfinite(block_time):
        raise TimestampConversionError(tx_id, f"block time {block_time!r} is not finite")
    try:
        dt = datetime.fromtimestamp(block_time, tz=UTC)
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampConversionError(tx_id, f"block time {block_time!r} out of range") from e
    return dt.strftime(DATE_FORMAT)


def to_rows(tx: AccountTransaction, currency: str = DEFAULT_CURRENCY) -> list[ExportRow]:
    """Build the export rows for `tx`.

    Raises:
        MissingAmountError: `total` is absent, the transaction cannot be priced.
        TimestampConversionError: `block_time` cannot be represented as a date.
    """
    if tx.total is None:
        raise MissingAmountError(tx.id, "transaction has no total")

    date = format_block_time(tx.block_time, tx.id)
    principal_micro = tx.subtotal if tx.subtotal is not None else tx.total
    label = RowLabel.MINING if isinstance(tx.details, PaydayRewardDetails) else None

    principal = ExportRow(
        date=date,
        amount=to_ccd(principal_micro),
        currency=currency,
        label=label,
        tx_hash=tx.transaction_hash,
    )
    if tx.cost is None:
        return [principal]

    fee = ExportRow(
        date=date,
        amount=-to_ccd(tx.cost),
        currency=currency,
        label=RowLabel.FEE,
        tx_hash=tx.transaction_hash,
    )
    if abs(tx.total) == tx.cost:
        return [fee]
    return [principal, fee]
