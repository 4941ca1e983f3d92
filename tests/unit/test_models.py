"""Unit tests for data models."""
from __future__ import annotations

import pytest

from liquidation_bot.models import Position, RouteDescriptor, RunSummary

ADDR_A = "0x" + "11" * 20
ADDR_B = "0x" + "22" * 20
ADDR_C = "0x" + "33" * 20


class TestPosition:
    def test_frozen(self) -> None:
        p = Position(user_address="0xabc", health_factor=1)
        with pytest.raises(AttributeError):
            p.health_factor = 2  # type: ignore[misc]


class TestRouteDescriptor:
    def test_empty_route(self) -> None:
        route = RouteDescriptor()
        assert len(route) == 0
        assert route.encode() == b""

    def test_single_hop_encoding(self) -> None:
        route = RouteDescriptor(tokens=(ADDR_A, ADDR_B), fees=(500,))
        encoded = route.encode()

        assert len(encoded) == 20 + 3 + 20
        assert encoded[:20] == bytes.fromhex("11" * 20)
        assert encoded[20:23] == (500).to_bytes(3, "big")
        assert encoded[23:] == bytes.fromhex("22" * 20)

    def test_two_hop_encoding(self) -> None:
        route = RouteDescriptor(tokens=(ADDR_A, ADDR_B, ADDR_C), fees=(3000, 3000))
        assert len(route) == 2
        assert len(route.encode()) == 20 * 3 + 3 * 2
        encoded = route.encode()
        assert encoded[23:43] == bytes.fromhex("22" * 20)
        assert encoded[20:23] == encoded[43:46] == (3000).to_bytes(3, "big")
        assert encoded[46:] == bytes.fromhex("33" * 20)

    def test_fee_count_must_match_hops(self) -> None:
        with pytest.raises(ValueError, match="one fee tier per hop"):
            RouteDescriptor(tokens=(ADDR_A, ADDR_B), fees=())

    def test_fees_without_tokens_rejected(self) -> None:
        with pytest.raises(ValueError):
            RouteDescriptor(tokens=(), fees=(500,))

    def test_invalid_address_rejected_on_encode(self) -> None:
        route = RouteDescriptor(tokens=("0x1234", ADDR_B), fees=(500,))
        with pytest.raises(ValueError, match="Invalid address"):
            route.encode()


class TestRunSummary:
    def test_defaults(self) -> None:
        assert RunSummary() == RunSummary(found=0, profitable=0, executed=0, failed=0)
