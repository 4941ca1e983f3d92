"""Data models — all frozen (immutable).

Amounts are integers: token amounts in the token's own decimals, prices and
USD values in WAD (1e18), liquidation bonuses in basis points
(10_000 = 100%).
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A user whose health factor was read during a scan."""

    user_address: str
    health_factor: int


@dataclass(frozen=True)
class UserPage:
    """One page of user addresses from the position index."""

    users: tuple[str, ...]
    next_cursor: str
    has_more: bool


@dataclass(frozen=True)
class MarketBalance:
    """A user's balances in one market, normalized to USD."""

    market: str
    total_supply: int
    total_borrow: int
    supply_usd: int
    borrow_usd: int
    price: int
    liquidation_bonus: int


@dataclass(frozen=True)
class MaxLiquidation:
    """Protocol-capped repay amount and the USD value of collateral seized."""

    amount: int
    reward_usd: int


@dataclass(frozen=True)
class SelectionResult:
    """Debt/collateral choice for a single user."""

    debt_market: MarketBalance
    collateral_market: MarketBalance
    max_liquidatable_amount: int
    expected_reward_usd: int
    user_address: str


@dataclass(frozen=True)
class RouteDescriptor:
    """Swap path: ``tokens[i] --fees[i]--> tokens[i + 1]``.

    An empty route (no tokens) means no swap is needed.
    """

    tokens: tuple[str, ...] = ()
    fees: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if self.tokens and len(self.fees) != len(self.tokens) - 1:
            raise ValueError("A route needs exactly one fee tier per hop")
        if not self.tokens and self.fees:
            raise ValueError("An empty route cannot carry fee tiers")

    def __len__(self) -> int:
        return len(self.fees)

    def encode(self) -> bytes:
        """Pack as a Uniswap V3 path: address(20) | fee(3) | address(20) ..."""
        if not self.tokens:
            return b""
        out = bytearray(_address_bytes(self.tokens[0]))
        for fee, token in zip(self.fees, self.tokens[1:]):
            out += fee.to_bytes(3, "big")
            out += _address_bytes(token)
        return bytes(out)


def _address_bytes(address: str) -> bytes:
    raw = bytes.fromhex(address[2:] if address.startswith("0x") else address)
    if len(raw) != 20:
        raise ValueError(f"Invalid address: {address}")
    return raw


@dataclass(frozen=True)
class LiquidationCandidate:
    """A profitable selection with its swap route attached."""

    selection: SelectionResult
    route: RouteDescriptor


@dataclass(frozen=True)
class LiquidationParams:
    """Arguments handed to the execution handler."""

    pool_token_borrowed: str
    pool_token_collateral: str
    underlying_borrowed: str
    user: str
    amount: int
    swap_path: bytes


@dataclass(frozen=True)
class RunSummary:
    """Counts produced by one orchestrator run."""

    found: int = 0
    profitable: int = 0
    executed: int = 0
    failed: int = 0
