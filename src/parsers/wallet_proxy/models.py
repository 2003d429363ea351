"""Pydantic models for Concordium wallet-proxy `/v1/accTransactions` responses.

Amounts (`cost`, `subtotal`, `total`, `transferAmount`) arrive as numeric
strings in microCCD and are kept as integers. Conversion to CCD happens only
when export rows are built.
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

TRANSFER_TYPES = frozenset({"transfer", "transferWithMemo"})
PAYDAY_REWARD_TYPE = "paydayAccountReward"
CONFIGURE_DELEGATION_TYPE = "configureDelegation"


class TransactionDetails(BaseModel):
    """Common shape of the `details` object."""

    type: str = ""
    description: str | None = None

    model_config = {"extra": "ignore", "frozen": True, "populate_by_name": True}


class TransferDetails(TransactionDetails):
    """Simple CCD transfer (with or without memo)."""

    transfer_source: str = Field(alias="transferSource")
    transfer_destination: str = Field(alias="transferDestination")
    transfer_amount: int | None = Field(None, alias="transferAmount")


class PaydayRewardDetails(TransactionDetails):
    """Staking/delegation reward paid out by the protocol at payday."""


class ConfigureDelegationDetails(TransactionDetails):
    """Delegation settings change. Moves no value."""


class OtherDetails(TransactionDetails):
    """Anything not modelled above."""


Details = TransferDetails | PaydayRewardDetails | ConfigureDelegationDetails | OtherDetails

_VARIANTS: dict[str, type[TransactionDetails]] = {
    PAYDAY_REWARD_TYPE: PaydayRewardDetails,
    CONFIGURE_DELEGATION_TYPE: ConfigureDelegationDetails,
    **{t: TransferDetails for t in TRANSFER_TYPES},
}


def parse_details(data: Any) -> Details:
    """Map a raw `details` object onto its variant.

    Never raises: unknown types and shapes that do not fit their variant
    become OtherDetails so one odd entry cannot fail a whole page.
    """
    if not isinstance(data, dict):
        return OtherDetails()

    tx_type = data.get("type")
    if not isinstance(tx_type, str):
        tx_type = ""

    variant = _VARIANTS.get(tx_type)
    if variant is not None:
        try:
            return variant.model_validate(data)
        except ValidationError:
            pass

    description = data.get("description")
    return OtherDetails(
        type=tx_type,
        description=description if isinstance(description, str) else None,
    )


class AccountTransaction(BaseModel):
    """One entry of the wallet-proxy transaction list."""

    id: int = Field(ge=0)
    block_time: float = Field(alias="blockTime")
    transaction_hash: str | None = Field(None, alias="transactionHash")
    details: Details = Field(default_factory=OtherDetails)
    cost: int | None = None  # microCCD, absent for protocol events
    subtotal: int | None = None  # microCCD, signed, excludes fee
    total: int | None = None  # microCCD, signed, net effect

    model_config = {"extra": "ignore", "frozen": True, "populate_by_name": True}

    @field_validator("details", mode="before")
    @classmethod
    def _coerce_details(cls, value: Any) -> Any:
        if isinstance(value, TransactionDetails):
            return value
        return parse_details(value)


class TransactionPage(BaseModel):
    """Response of one `/v1/accTransactions/{account}` request."""

    count: int
    limit: int
    order: str | None = None
    transactions: list[AccountTransaction] = []

    model_config = {"extra": "ignore"}

    @property
    def has_more(self) -> bool:
        """A full page means more may exist; an empty page always ends paging."""
        return bool(self.transactions) and self.count == self.limit

    @property
    def cursor(self) -> int | None:
        """Id of the oldest transaction on the page, used as `from` next time."""
        if not self.transactions:
            return None
        return self.transactions[-1].id
