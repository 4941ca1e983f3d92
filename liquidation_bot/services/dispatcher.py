"""Single-writer dispatch queue for liquidation submissions.

Submissions mutate shared on-chain state (the sender's nonce), so exactly one
worker drains the queue and each submission settles before the next starts.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Sequence

from ..errors import ExecutionError
from ..interfaces.execution import LiquidationHandler
from ..models import (
    LiquidationCandidate,
    LiquidationParams,
    RouteDescriptor,
    SelectionResult,
)
from .routing import SwapRouteBuilder

logger = logging.getLogger(__name__)


def _describe_error(error: Exception) -> str:
    return str(error) or type(error).__name__


@dataclass(frozen=True)
class DispatchOutcome:
    candidate: LiquidationCandidate
    ok: bool
    receipt: Any = None
    error: str = ""


class LiquidationDispatcher:
    """Attach routes to accepted selections and submit them one at a time."""

    def __init__(
        self, handler: LiquidationHandler, route_builder: SwapRouteBuilder
    ) -> None:
        self._handler = handler
        self._routes = route_builder

    def build_candidate(self, selection: SelectionResult) -> LiquidationCandidate:
        route = self._routes.route_for_markets(
            selection.debt_market.market, selection.collateral_market.market
        )
        return LiquidationCandidate(selection=selection, route=route)

    def build_params(self, candidate: LiquidationCandidate) -> LiquidationParams:
        selection = candidate.selection
        debt = selection.debt_market.market
        return LiquidationParams(
            pool_token_borrowed=debt,
            pool_token_collateral=selection.collateral_market.market,
            underlying_borrowed=self._routes.underlying_of(debt),
            user=selection.user_address,
            amount=selection.max_liquidatable_amount,
            swap_path=candidate.route.encode(),
        )

    async def _submit(self, selection: SelectionResult) -> DispatchOutcome:
        user = selection.user_address
        candidate = LiquidationCandidate(selection=selection, route=RouteDescriptor())
        try:
            candidate = self.build_candidate(selection)
            receipt = await self._handler.handle_liquidation(
                self.build_params(candidate)
            )
        except ExecutionError as e:
            logger.error("Liquidation of %s failed: %s", user, e)
            return DispatchOutcome(candidate=candidate, ok=False, error=_describe_error(e))
        except Exception as e:
            logger.error("Unexpected error liquidating %s: %r", user, e)
            return DispatchOutcome(candidate=candidate, ok=False, error=_describe_error(e))
        logger.info("Liquidated %s", user)
        return DispatchOutcome(candidate=candidate, ok=True, receipt=receipt)

    async def dispatch_all(
        self, selections: Sequence[SelectionResult]
    ) -> tuple[DispatchOutcome, ...]:
        """Submit every selection in order; failures do not stop the queue."""
        queue: asyncio.Queue[SelectionResult] = asyncio.Queue()
        outcomes: list[DispatchOutcome] = []

        async def worker() -> None:
            while True:
                selection = await queue.get()
                try:
                    outcomes.append(await self._submit(selection))
                finally:
                    queue.task_done()

        for selection in selections:
            queue.put_nowait(selection)

        task = asyncio.create_task(worker())
        try:
            await queue.join()
        finally:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        return tuple(outcomes)
