"""Paginated scan of the position index for liquidatable users."""
from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from ..errors import AdapterReadError
from ..fixed_point import WAD, format_units, parse_units
from ..interfaces.fetcher import PositionIndex
from ..interfaces.protocol_adapter import ProtocolAdapter
from ..models import Position

logger = logging.getLogger(__name__)

HF_THRESHOLD = WAD
LOW_HF_CEILING = parse_units("0.65")
HF_ANOMALY_FLOOR = parse_units("0.01")


def is_liquidatable(health_factor: int) -> bool:
    return health_factor < HF_THRESHOLD


class UserScanner:
    """Walk every page of users and keep those with a health factor below 1."""

    def __init__(
        self,
        index: PositionIndex,
        adapter: ProtocolAdapter,
        max_concurrency: int = 50,
        page_delay_seconds: float = 0.0,
    ) -> None:
        self._index = index
        self._adapter = adapter
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._page_delay = page_delay_seconds

    async def _health_factor(self, user: str) -> Position | None:
        async with self._semaphore:
            try:
                hf = await self._adapter.get_health_factor(user)
            except AdapterReadError as e:
                logger.warning("Skipping %s: health factor read failed: %s", user, e)
                return None
        return Position(user_address=user, health_factor=hf)

    def _keep(self, position: Position) -> bool:
        hf = position.health_factor
        if HF_ANOMALY_FLOOR < hf < LOW_HF_CEILING:
            logger.info(
                "User %s has a low HF (%s)", position.user_address, format_units(hf)
            )
        elif hf <= HF_ANOMALY_FLOOR:
            logger.warning(
                "User %s has a near-zero HF (%s), possible stale oracle",
                position.user_address,
                format_units(hf),
            )
        return is_liquidatable(hf)

    async def scan(self) -> AsyncIterator[Position]:
        """Yield liquidatable positions page by page.

        Raises ``SourceFetchError`` if a page cannot be fetched.
        """
        cursor = ""
        has_more = True
        while has_more:
            page = await self._index.fetch_page(cursor)
            cursor, has_more = page.next_cursor, page.has_more
            logger.info("%d users fetched", len(page.users))

            results = await asyncio.gather(
                *(self._health_factor(user) for user in page.users)
            )
            for position in results:
                if position is not None and self._keep(position):
                    yield position

            if has_more and self._page_delay:
                await asyncio.sleep(self._page_delay)

    async def scan_all(self) -> tuple[Position, ...]:
        positions = tuple([p async for p in self.scan()])
        logger.info("Found %d liquidatable users", len(positions))
        return positions
