"""Handler that logs liquidations instead of sending them."""
from __future__ import annotations

import logging

from ..models import LiquidationParams

logger = logging.getLogger(__name__)


class ReadOnlyHandler:
    """Dry-run execution: record what would be submitted."""

    def __init__(self) -> None:
        self.submitted: list[LiquidationParams] = []

    async def handle_liquidation(self, params: LiquidationParams) -> None:
        self.submitted.append(params)
        logger.info(
            "[dry-run] liquidate %s: repay %s on %s, seize %s, path 0x%s",
            params.user,
            params.amount,
            params.pool_token_borrowed,
            params.pool_token_collateral,
            params.swap_path.hex(),
        )
