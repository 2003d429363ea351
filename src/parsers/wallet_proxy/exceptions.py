class WalletProxyError(Exception):
    pass


class FetchError(WalletProxyError):
    """A page could not be retrieved or decoded for one account."""

    def __init__(self, account: str, message: str) -> None:
        super().__init__(f"{account}: {message}")
        self.account = account
        self.message = message
