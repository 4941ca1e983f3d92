"""Morpho-Aave protocol adapter — reads positions through the Morpho lens."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from ...config import ProtocolConfig
from ...errors import AdapterReadError, SourceFetchError
from ...models import MarketBalance, MaxLiquidation
from . import liquidation_math
from .abis import LENS_ABI, ORACLE_ABI

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketInfo:
    underlying: str
    liquidation_bonus: int
    decimals: int


class MorphoAaveAdapter:
    """Fetch balances, prices and liquidation parameters for Morpho-Aave V2."""

    def __init__(self, client: Any, config: ProtocolConfig) -> None:
        self._client = client
        self._config = config
        self._lens = config.contracts.get("lens", "")
        self._oracle = config.contracts.get("oracle", "")
        self._usd_reference = config.contracts.get("usd_reference", "")
        self._close_factor_bps = config.close_factor_bps
        self._market_cache: dict[str, MarketInfo] = {}

    @property
    def protocol_name(self) -> str:
        return "morpho-aave"

    async def _read(self, address: str, abi: list[dict], fn_name: str, *args: Any) -> Any:
        try:
            return await self._client.call(address, abi, fn_name, *args)
        except Exception as e:
            raise AdapterReadError(f"{fn_name}{args} failed: {e}") from e

    async def _market_info(self, market: str) -> MarketInfo:
        """Static market configuration (with caching)."""
        market = market.lower()
        if market in self._market_cache:
            return self._market_cache[market]

        raw = await self._read(
            self._lens, LENS_ABI, "getMarketConfiguration", self._client.checksum(market)
        )
        try:
            info = MarketInfo(
                underlying=str(raw[0]).lower(),
                liquidation_bonus=int(raw[9]),
                decimals=int(raw[10]),
            )
        except (IndexError, TypeError, ValueError) as e:
            raise AdapterReadError(f"Malformed market configuration for {market}") from e

        self._market_cache[market] = info
        return info

    async def _usd_price(self, underlying: str) -> int:
        price = await self._read(
            self._oracle, ORACLE_ABI, "getAssetPrice", self._client.checksum(underlying)
        )
        reference = None
        if self._usd_reference:
            reference = await self._read(
                self._oracle,
                ORACLE_ABI,
                "getAssetPrice",
                self._client.checksum(self._usd_reference),
            )
        try:
            return liquidation_math.price_in_usd(
                int(price), None if reference is None else int(reference)
            )
        except ZeroDivisionError as e:
            raise AdapterReadError("USD reference price is zero") from e
        except (TypeError, ValueError) as e:
            raise AdapterReadError(f"Malformed oracle price for {underlying}") from e

    async def fetch_active_markets(self) -> list[str]:
        """All markets created on Morpho, read from the lens.

        Serves as a market index, so failures raise ``SourceFetchError``.
        """
        try:
            markets = await self._client.call(self._lens, LENS_ABI, "getAllMarkets")
            return [str(m).lower() for m in markets]
        except Exception as e:
            raise SourceFetchError(f"getAllMarkets failed: {e}") from e

    async def get_health_factor(self, user: str) -> int:
        hf = await self._read(
            self._lens, LENS_ABI, "getUserHealthFactor", self._client.checksum(user)
        )
        try:
            return int(hf)
        except (TypeError, ValueError) as e:
            raise AdapterReadError(f"Malformed health factor for {user}", user=user) from e

    async def _balance(self, fn_name: str, market: str, user: str) -> int:
        raw = await self._read(
            self._lens,
            LENS_ABI,
            fn_name,
            self._client.checksum(market),
            self._client.checksum(user),
        )
        try:
            _, _, total = raw
            return int(total)
        except (TypeError, ValueError) as e:
            raise AdapterReadError(
                f"Malformed {fn_name} result for {user} on {market}", user=user
            ) from e

    async def get_supply_balance(self, market: str, user: str) -> int:
        return await self._balance("getCurrentSupplyBalanceInOf", market, user)

    async def get_borrow_balance(self, market: str, user: str) -> int:
        return await self._balance("getCurrentBorrowBalanceInOf", market, user)

    async def normalize_to_usd(
        self, market: str, amounts: Sequence[int]
    ) -> tuple[int, list[int]]:
        info = await self._market_info(market)
        price = await self._usd_price(info.underlying)
        return price, [
            liquidation_math.to_usd(amount, price, info.decimals) for amount in amounts
        ]

    async def get_liquidation_bonus(self, market: str) -> int:
        return (await self._market_info(market)).liquidation_bonus

    async def to_usd(self, market: str, amount: int, price: int) -> int:
        info = await self._market_info(market)
        return liquidation_math.to_usd(amount, price, info.decimals)

    async def compute_max_liquidation(
        self, debt_market: MarketBalance, collateral_market: MarketBalance
    ) -> MaxLiquidation:
        info = await self._market_info(debt_market.market)
        try:
            result = liquidation_math.max_liquidation(
                debt_market, collateral_market, info.decimals, self._close_factor_bps
            )
        except ZeroDivisionError as e:
            raise AdapterReadError(
                f"Cannot size liquidation on {debt_market.market}: {e}"
            ) from e
        logger.debug(
            "Max liquidation on %s: %d (reward %d)",
            debt_market.market,
            result.amount,
            result.reward_usd,
        )
        return result
