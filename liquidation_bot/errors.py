"""Error taxonomy for the liquidation bot."""


class LiquidationBotError(Exception):
    """Base class for all bot errors."""


class SourceFetchError(LiquidationBotError):
    """Position or market index unreachable, or returned a malformed page.

    Not retried; aborts the current run.
    """


class AdapterReadError(LiquidationBotError):
    """A protocol read failed or returned unusable data for one user."""

    def __init__(self, message: str, user: str = "") -> None:
        super().__init__(message)
        self.user = user


class ExecutionError(LiquidationBotError):
    """A liquidation submission failed or reverted."""

    def __init__(self, message: str, user: str = "", tx_hash: str = "") -> None:
        super().__init__(message)
        self.user = user
        self.tx_hash = tx_hash
