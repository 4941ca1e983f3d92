"""Unit tests for fixed-point helpers."""
from __future__ import annotations

from decimal import Decimal

import pytest

from liquidation_bot.fixed_point import (
    WAD,
    format_units,
    parse_units,
    percent_div,
    percent_mul,
    wad_div,
    wad_mul,
)


class TestPercentMath:
    def test_percent_mul_bonus(self) -> None:
        assert percent_mul(1000 * WAD, 500) == 50 * WAD

    def test_percent_mul_rounds_half_up(self) -> None:
        # 1 * 5000 / 10000 = 0.5 -> 1
        assert percent_mul(1, 5000) == 1

    def test_percent_mul_zero(self) -> None:
        assert percent_mul(0, 500) == 0
        assert percent_mul(100, 0) == 0

    def test_percent_mul_negative_is_symmetric(self) -> None:
        assert percent_mul(1000, -500) == -percent_mul(1000, 500)

    def test_percent_div_inverts_mul(self) -> None:
        assert percent_div(105 * WAD, 10_500) == 100 * WAD

    def test_percent_div_by_zero(self) -> None:
        with pytest.raises(ZeroDivisionError):
            percent_div(1, 0)


class TestWadMath:
    def test_wad_mul(self) -> None:
        assert wad_mul(2 * WAD, 3 * WAD) == 6 * WAD

    def test_wad_div(self) -> None:
        assert wad_div(WAD, 4 * WAD) == WAD // 4

    def test_wad_div_by_zero(self) -> None:
        with pytest.raises(ZeroDivisionError):
            wad_div(WAD, 0)


class TestUnits:
    def test_parse_units(self) -> None:
        assert parse_units("1") == WAD
        assert parse_units("0.65") == 65 * 10**16
        assert parse_units(Decimal("2.5"), 6) == 2_500_000

    def test_format_units(self) -> None:
        assert format_units(WAD) == "1"
        assert format_units(15 * 10**17) == "1.5"
        assert format_units(0) == "0"
        assert format_units(1_234_567, 6) == "1.234567"
