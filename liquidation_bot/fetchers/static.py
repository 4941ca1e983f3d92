"""Market index backed by a fixed list from config."""
from __future__ import annotations

from typing import Iterable


class StaticMarketIndex:
    """Return a configured market list instead of querying an index."""

    def __init__(self, markets: Iterable[str]) -> None:
        self._markets = [m.lower() for m in markets]

    async def fetch_active_markets(self) -> list[str]:
        return list(self._markets)
