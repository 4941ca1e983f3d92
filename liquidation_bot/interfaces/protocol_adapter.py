"""Protocol adapter — per-protocol reads and risk arithmetic."""
from typing import Protocol, Sequence

from ..models import MarketBalance, MaxLiquidation


class ProtocolAdapter(Protocol):
    """Abstract interface over a lending protocol's on-chain state.

    Implementations raise ``AdapterReadError`` when a read fails.
    """

    @property
    def protocol_name(self) -> str: ...

    async def get_health_factor(self, user: str) -> int: ...

    async def get_supply_balance(self, market: str, user: str) -> int: ...

    async def get_borrow_balance(self, market: str, user: str) -> int: ...

    async def normalize_to_usd(
        self, market: str, amounts: Sequence[int]
    ) -> tuple[int, list[int]]: ...

    async def get_liquidation_bonus(self, market: str) -> int: ...

    async def compute_max_liquidation(
        self, debt_market: MarketBalance, collateral_market: MarketBalance
    ) -> MaxLiquidation: ...

    async def to_usd(self, market: str, amount: int, price: int) -> int: ...
