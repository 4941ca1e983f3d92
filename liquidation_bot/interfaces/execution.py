"""Execution handler protocol — submits liquidations on-chain."""
from typing import Any, Protocol

from ..models import LiquidationParams


class LiquidationHandler(Protocol):
    """Abstract interface for submitting a liquidation.

    Implementations raise ``ExecutionError`` on failure or revert.
    """

    async def handle_liquidation(self, params: LiquidationParams) -> Any: ...
