class TransformError(Exception):
    """A single transaction could not be turned into export rows."""

    def __init__(self, tx_id: int, message: str) -> None:
        super().__init__(f"tx {tx_id}: {message}")
        self.tx_id = tx_id
        self.message = message


class MissingAmountError(TransformError):
    pass


class TimestampConversionError(TransformError):
    pass
