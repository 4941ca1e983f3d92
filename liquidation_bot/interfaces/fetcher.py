"""Index protocols — paginated users and the active market list."""
from typing import Protocol

from ..models import UserPage


class PositionIndex(Protocol):
    """Paginated source of user addresses. An empty cursor means start."""

    async def fetch_page(self, cursor: str = "") -> UserPage: ...


class MarketIndex(Protocol):
    """One-shot source of the protocol's active markets."""

    async def fetch_active_markets(self) -> list[str]: ...
