"""Pure fixed-point arithmetic for Morpho-Aave liquidations — no I/O."""
from __future__ import annotations

from ...fixed_point import percent_div, percent_mul, wad_div
from ...models import MarketBalance, MaxLiquidation


def price_in_usd(asset_price: int, reference_price: int | None = None) -> int:
    """Convert a WAD price quoted in the oracle base currency to USD.

    ``reference_price`` is the base-currency price of a USD-pegged asset.
    Without it, oracle prices are taken to be USD already.
    """
    if reference_price is None:
        return asset_price
    if reference_price == 0:
        raise ZeroDivisionError("USD reference price is zero")
    return wad_div(asset_price, reference_price)


def to_usd(amount: int, price: int, decimals: int) -> int:
    """USD value (WAD) of ``amount`` token units at a WAD ``price``."""
    return amount * price // 10**decimals


def from_usd(usd_amount: int, price: int, decimals: int) -> int:
    """Token units worth ``usd_amount`` (WAD) at a WAD ``price``."""
    if price == 0:
        raise ZeroDivisionError("Price is zero")
    return usd_amount * 10**decimals // price


def max_liquidation(
    debt: MarketBalance,
    collateral: MarketBalance,
    debt_decimals: int,
    close_factor_bps: int = 5000,
) -> MaxLiquidation:
    """Largest repayable amount and the collateral value it seizes.

    The repay amount is capped by the close factor on the debt, then by the
    collateral available: seized value = repaid value × liquidation bonus.
    """
    to_liquidate = percent_mul(debt.total_borrow, close_factor_bps)
    repaid_usd = to_usd(to_liquidate, debt.price, debt_decimals)
    reward_usd = percent_mul(repaid_usd, collateral.liquidation_bonus)

    if reward_usd > collateral.supply_usd:
        reward_usd = collateral.supply_usd
        repaid_usd = percent_div(collateral.supply_usd, collateral.liquidation_bonus)
        to_liquidate = from_usd(repaid_usd, debt.price, debt_decimals)

    return MaxLiquidation(amount=to_liquidate, reward_usd=reward_usd)
