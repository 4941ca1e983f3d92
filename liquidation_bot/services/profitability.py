"""Profitability filter for liquidation candidates."""
from __future__ import annotations

from ..fixed_point import BASE_PERCENT, percent_mul
from ..interfaces.protocol_adapter import ProtocolAdapter


class ProfitabilityEvaluator:
    """Keep a liquidation only if its bonus beats a USD threshold.

    ``threshold_usd`` is in WAD (1e18 = 1 USD).
    """

    def __init__(self, adapter: ProtocolAdapter, threshold_usd: int) -> None:
        self._adapter = adapter
        self._threshold_usd = threshold_usd

    async def net_reward_usd(
        self,
        market: str,
        amount: int,
        price: int,
        bonus_market: str | None = None,
    ) -> int:
        """USD value of ``amount`` times the bonus over 100%."""
        bonus = await self._adapter.get_liquidation_bonus(bonus_market or market)
        usd_amount = await self._adapter.to_usd(market, amount, price)
        return percent_mul(usd_amount, bonus - BASE_PERCENT)

    async def is_profitable(
        self,
        market: str,
        amount: int,
        price: int,
        bonus_market: str | None = None,
    ) -> bool:
        net = await self.net_reward_usd(market, amount, price, bonus_market)
        return net > self._threshold_usd
