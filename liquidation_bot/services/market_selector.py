"""Per-user debt/collateral market selection."""
from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ..errors import AdapterReadError
from ..fixed_point import format_units
from ..interfaces.diagnostics import DiagnosticsSink
from ..interfaces.protocol_adapter import ProtocolAdapter
from ..models import MarketBalance, SelectionResult

logger = logging.getLogger(__name__)


def pick_debt_market(balances: Sequence[MarketBalance]) -> MarketBalance:
    """Largest USD borrow; ties go to the lowest market identifier."""
    if not balances:
        raise ValueError("No balances to choose from")
    return min(balances, key=lambda b: (-b.borrow_usd, b.market.lower()))


def pick_collateral_market(
    balances: Sequence[MarketBalance],
) -> MarketBalance | None:
    """Largest USD supply among markets that pay a liquidation bonus."""
    eligible = [b for b in balances if b.liquidation_bonus > 0]
    if not eligible:
        return None
    return min(eligible, key=lambda b: (-b.supply_usd, b.market.lower()))


class MarketSelector:
    """Resolve which market to repay and which collateral to seize for a user."""

    def __init__(self, adapter: ProtocolAdapter, diagnostics: DiagnosticsSink) -> None:
        self._adapter = adapter
        self._diagnostics = diagnostics

    async def fetch_balance(self, market: str, user: str) -> MarketBalance:
        """Read one market's balances for ``user`` and value them in USD."""
        total_supply, total_borrow = await asyncio.gather(
            self._adapter.get_supply_balance(market, user),
            self._adapter.get_borrow_balance(market, user),
        )
        price, usd_amounts = await self._adapter.normalize_to_usd(
            market, [total_supply, total_borrow]
        )
        if len(usd_amounts) != 2:
            raise AdapterReadError(
                f"normalize_to_usd returned {len(usd_amounts)} values for {market}",
                user=user,
            )
        supply_usd, borrow_usd = usd_amounts
        liquidation_bonus = await self._adapter.get_liquidation_bonus(market)
        return MarketBalance(
            market=market,
            total_supply=total_supply,
            total_borrow=total_borrow,
            supply_usd=supply_usd,
            borrow_usd=borrow_usd,
            price=price,
            liquidation_bonus=liquidation_bonus,
        )

    async def select_markets(
        self, user_address: str, active_markets: Sequence[str]
    ) -> SelectionResult:
        if not active_markets:
            raise AdapterReadError("No active markets to select from", user=user_address)

        balances = await asyncio.gather(
            *(self.fetch_balance(market, user_address) for market in active_markets)
        )

        debt_market = pick_debt_market(balances)
        collateral_market = pick_collateral_market(balances)
        if collateral_market is None:
            raise AdapterReadError(
                f"No collateral market with a liquidation bonus for {user_address}",
                user=user_address,
            )

        self._diagnostics.record_table(
            {
                "user": user_address,
                "debt": _describe(debt_market),
                "collateral": _describe(collateral_market),
            }
        )

        max_liquidation = await self._adapter.compute_max_liquidation(
            debt_market, collateral_market
        )
        return SelectionResult(
            debt_market=debt_market,
            collateral_market=collateral_market,
            max_liquidatable_amount=max_liquidation.amount,
            expected_reward_usd=max_liquidation.reward_usd,
            user_address=user_address,
        )


def _describe(balance: MarketBalance) -> dict[str, str]:
    return {
        "market": balance.market,
        "borrow_usd": format_units(balance.borrow_usd),
        "supply_usd": format_units(balance.supply_usd),
        "price": format_units(balance.price),
    }
