"""Swap route policy for converting seized collateral into the debt asset."""
from __future__ import annotations

import logging

from ..config import SwapConfig
from ..models import RouteDescriptor

logger = logging.getLogger(__name__)


class SwapRouteBuilder:
    """Classify an asset pair into a fixed route shape.

    This is a routing policy: it never inspects pool depth.
    """

    def __init__(self, config: SwapConfig) -> None:
        self._fees = config.fees
        self._base_asset = config.base_asset.lower()
        self._stablecoins = frozenset(s.lower() for s in config.stablecoins)
        self._underlyings = {k.lower(): v.lower() for k, v in config.underlyings.items()}

    @property
    def base_asset(self) -> str:
        return self._base_asset

    def underlying_of(self, market: str) -> str:
        """Resolve a market (pool token) to its underlying asset."""
        market = market.lower()
        return self._underlyings.get(market, market)

    def is_stablecoin(self, asset: str) -> bool:
        return asset.lower() in self._stablecoins

    def build_route(self, debt_asset: str, collateral_asset: str) -> RouteDescriptor:
        debt_asset = debt_asset.lower()
        collateral_asset = collateral_asset.lower()

        if debt_asset == collateral_asset:
            return RouteDescriptor()

        if self._base_asset in (debt_asset, collateral_asset):
            return RouteDescriptor(
                tokens=(debt_asset, collateral_asset),
                fees=(self._fees.classic,),
            )

        if self.is_stablecoin(debt_asset) and self.is_stablecoin(collateral_asset):
            return RouteDescriptor(
                tokens=(debt_asset, collateral_asset),
                fees=(self._fees.stable,),
            )

        return RouteDescriptor(
            tokens=(debt_asset, self._base_asset, collateral_asset),
            fees=(self._fees.exotic, self._fees.exotic),
        )

    def route_for_markets(
        self, debt_market: str, collateral_market: str
    ) -> RouteDescriptor:
        """Build the route between the underlyings of two markets."""
        if debt_market.lower() == collateral_market.lower():
            return RouteDescriptor()
        route = self.build_route(
            self.underlying_of(debt_market), self.underlying_of(collateral_market)
        )
        logger.debug(
            "Route %s -> %s: %d hop(s)", debt_market, collateral_market, len(route)
        )
        return route
