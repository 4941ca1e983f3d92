"""Fixed-point helpers matching the protocol's WAD and basis-point units."""
from __future__ import annotations

from decimal import Decimal

WAD = 10**18
HALF_WAD = WAD // 2

BASE_PERCENT = 10_000
HALF_PERCENT = BASE_PERCENT // 2


def percent_mul(value: int, percentage: int) -> int:
    """Multiply ``value`` by a basis-point ``percentage``, rounding half up.

    Negative percentages are applied symmetrically so the result is
    monotonic in ``value``.
    """
    if value == 0 or percentage == 0:
        return 0
    if percentage < 0:
        return -percent_mul(value, -percentage)
    return (value * percentage + HALF_PERCENT) // BASE_PERCENT


def percent_div(value: int, percentage: int) -> int:
    """Divide ``value`` by a basis-point ``percentage``, rounding half up."""
    if percentage == 0:
        raise ZeroDivisionError("percent_div by zero")
    return (value * BASE_PERCENT + percentage // 2) // percentage


def wad_mul(a: int, b: int) -> int:
    return (a * b + HALF_WAD) // WAD


def wad_div(a: int, b: int) -> int:
    if b == 0:
        raise ZeroDivisionError("wad_div by zero")
    return (a * WAD + b // 2) // b


def parse_units(value: str | int | float | Decimal, decimals: int = 18) -> int:
    """Convert a human amount (``"1.5"``) to an integer in ``decimals`` units."""
    return int(Decimal(str(value)).scaleb(decimals).to_integral_value())


def format_units(value: int, decimals: int = 18) -> str:
    """Render an integer amount in ``decimals`` units as a decimal string."""
    text = format(Decimal(value).scaleb(-decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
