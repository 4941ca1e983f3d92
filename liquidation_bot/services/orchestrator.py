"""Liquidation orchestration — discover, evaluate, dispatch."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Iterator, Sequence

from ..config import AppConfig, BotConfig
from ..diagnostics import LoggingDiagnostics
from ..errors import AdapterReadError
from ..fixed_point import format_units, parse_units
from ..interfaces.diagnostics import DiagnosticsSink
from ..interfaces.execution import LiquidationHandler
from ..interfaces.fetcher import MarketIndex, PositionIndex
from ..interfaces.notifier import Notifier
from ..interfaces.protocol_adapter import ProtocolAdapter
from ..models import Position, RunSummary, SelectionResult
from .dispatcher import DispatchOutcome, LiquidationDispatcher
from .market_selector import MarketSelector
from .profitability import ProfitabilityEvaluator
from .routing import SwapRouteBuilder
from .scanner import UserScanner

logger = logging.getLogger(__name__)


def batched(items: Sequence[Any], size: int) -> Iterator[tuple[Any, ...]]:
    """Split ``items`` into consecutive tuples of at most ``size`` elements."""
    if size < 1:
        raise ValueError("Batch size must be at least 1")
    for start in range(0, len(items), size):
        yield tuple(items[start:start + size])


class LiquidationOrchestrator:
    """Runs one scan → select → evaluate → dispatch pass over all users."""

    def __init__(
        self,
        config: BotConfig,
        index: PositionIndex,
        adapter: ProtocolAdapter,
        handler: LiquidationHandler,
        route_builder: SwapRouteBuilder,
        market_index: MarketIndex | None = None,
        diagnostics: DiagnosticsSink | None = None,
        notifiers: Sequence[Notifier] = (),
    ) -> None:
        self._config = config
        self._market_index = market_index
        self._diagnostics: DiagnosticsSink = diagnostics or LoggingDiagnostics()
        self._notifiers = list(notifiers)
        self._semaphore = asyncio.Semaphore(config.max_concurrency)

        self._scanner = UserScanner(
            index,
            adapter,
            max_concurrency=config.max_concurrency,
            page_delay_seconds=config.page_delay_seconds,
        )
        self._selector = MarketSelector(adapter, self._diagnostics)
        self._evaluator = ProfitabilityEvaluator(
            adapter, parse_units(config.profitable_threshold_usd)
        )
        self._dispatcher = LiquidationDispatcher(handler, route_builder)

    @classmethod
    def from_config(cls, config: AppConfig, dry_run: bool = False) -> LiquidationOrchestrator:
        """Wire concrete collaborators from application config."""
        from ..chains.evm import EvmClient
        from ..fetchers import GraphFetcher, StaticMarketIndex
        from ..handlers import LiquidatorHandler, ReadOnlyHandler
        from ..notifications import TelegramNotifier
        from ..protocols import PROTOCOL_FACTORIES

        client = EvmClient(config.chain)
        adapter = PROTOCOL_FACTORIES[config.protocol.name](client, config.protocol)
        fetcher = GraphFetcher(config.fetcher)

        market_index: MarketIndex = fetcher
        if config.protocol.markets:
            market_index = StaticMarketIndex(config.protocol.markets)
        elif config.protocol.market_source == "lens":
            market_index = adapter

        handler: LiquidationHandler
        if dry_run or not config.liquidator.private_key:
            if not dry_run:
                logger.warning("No private key configured, running read-only")
            handler = ReadOnlyHandler()
        else:
            handler = LiquidatorHandler(client, config.liquidator, config.chain.chain_id)

        notifiers: list[Notifier] = []
        if config.notifications.telegram.enabled:
            notifiers.append(TelegramNotifier(config.notifications.telegram))

        return cls(
            config.bot,
            fetcher,
            adapter,
            handler,
            SwapRouteBuilder(config.swap),
            market_index=market_index,
            notifiers=notifiers,
        )

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _format_address(address: str) -> str:
        if len(address) > 16:
            return f"{address[:10]}...{address[-6:]}"
        return address

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    def _build_summary_message(self, summary: RunSummary) -> str:
        return (
            f"🤖 Liquidation run\n"
            f"\n"
            f"Liquidatable users: {summary.found}\n"
            f"Profitable: {summary.profitable}\n"
            f"Executed: {summary.executed} · Failed: {summary.failed}\n"
            f"\n"
            f"{self._now_str()} UTC"
        )

    def _build_execution_alert(self, outcome: DispatchOutcome) -> str:
        selection = outcome.candidate.selection
        return (
            f"⚡ Liquidated {self._format_address(selection.user_address)}\n"
            f"\n"
            f"Debt: {self._format_address(selection.debt_market.market)}\n"
            f"Collateral: {self._format_address(selection.collateral_market.market)}\n"
            f"Amount: {selection.max_liquidatable_amount}\n"
            f"Expected reward: ${format_units(selection.expected_reward_usd)}\n"
            f"Route hops: {len(outcome.candidate.route)}\n"
            f"\n"
            f"{self._now_str()} UTC"
        )

    # ------------------------------------------------------------------
    # Notification dispatch
    # ------------------------------------------------------------------

    async def _send_log(self, message: str, silent: bool = True) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_log(message, silent=silent)
            except Exception as e:
                logger.error("Notifier send_log failed: %s", e)

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_alert failed: %s", e)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    async def compute_liquidatable_users(self) -> tuple[Position, ...]:
        return await self._scanner.scan_all()

    async def compute_markets(self) -> list[str]:
        """Active markets, or an empty list when no market index is wired."""
        if self._market_index is None:
            logger.warning("No market index configured")
            return []
        markets = list(await self._market_index.fetch_active_markets())
        logger.info("%d markets fetched", len(markets))
        return markets

    async def _select(
        self, user: str, markets: Sequence[str]
    ) -> SelectionResult | None:
        async with self._semaphore:
            try:
                return await self._selector.select_markets(user, markets)
            except AdapterReadError as e:
                logger.warning("Skipping %s: %s", user, e)
                self._diagnostics.record("selection_failed", user=user, error=str(e))
                return None

    async def _accept(self, selection: SelectionResult) -> SelectionResult | None:
        debt = selection.debt_market
        async with self._semaphore:
            try:
                profitable = await self._evaluator.is_profitable(
                    debt.market,
                    selection.max_liquidatable_amount,
                    debt.price,
                    bonus_market=selection.collateral_market.market,
                )
            except AdapterReadError as e:
                logger.warning("Skipping %s: %s", selection.user_address, e)
                self._diagnostics.record(
                    "profitability_failed", user=selection.user_address, error=str(e)
                )
                return None
        if not profitable:
            logger.debug("%s is not profitable to liquidate", selection.user_address)
            return None
        return selection

    async def evaluate_batch(
        self, batch: Sequence[Position], markets: Sequence[str]
    ) -> tuple[SelectionResult, ...]:
        selections = await asyncio.gather(
            *(self._select(p.user_address, markets) for p in batch)
        )
        accepted = await asyncio.gather(
            *(self._accept(s) for s in selections if s is not None)
        )
        return tuple(s for s in accepted if s is not None)

    async def evaluate(
        self, positions: Sequence[Position], markets: Sequence[str]
    ) -> tuple[SelectionResult, ...]:
        """Evaluate positions batch by batch; batch N finishes before N + 1."""
        accepted: tuple[SelectionResult, ...] = ()
        for round_no, batch in enumerate(batched(positions, self._config.batch_size), 1):
            logger.info("Evaluating batch %d (%d users)", round_no, len(batch))
            accepted = accepted + await self.evaluate_batch(batch, markets)
        return accepted

    # ------------------------------------------------------------------
    # Core workflows
    # ------------------------------------------------------------------

    async def run(self) -> RunSummary:
        """One full pass. Discovery errors propagate to the caller."""
        positions = await self.compute_liquidatable_users()
        logger.info("Found %d users liquidatable", len(positions))
        markets = await self.compute_markets()

        accepted = await self.evaluate(positions, markets)

        outcomes: tuple[DispatchOutcome, ...] = ()
        if accepted:
            logger.info("%d users to liquidate", len(accepted))
            outcomes = await self._dispatcher.dispatch_all(accepted)

        for outcome in outcomes:
            if outcome.ok:
                await self._send_alert(
                    self._build_execution_alert(outcome), subject="⚡ Liquidation executed"
                )
            else:
                self._diagnostics.record(
                    "execution_failed",
                    user=outcome.candidate.selection.user_address,
                    error=outcome.error,
                )

        summary = RunSummary(
            found=len(positions),
            profitable=len(accepted),
            executed=sum(1 for o in outcomes if o.ok),
            failed=sum(1 for o in outcomes if not o.ok),
        )
        logger.info(
            "Run complete — found: %d  profitable: %d  executed: %d  failed: %d",
            summary.found,
            summary.profitable,
            summary.executed,
            summary.failed,
        )
        await self._send_log(self._build_summary_message(summary))
        return summary

    async def run_continuous(self, interval_minutes: int | None = None) -> None:
        """Run liquidation passes forever."""
        interval = interval_minutes or self._config.interval_minutes
        logger.info("Starting continuous liquidation loop (every %d minutes)", interval)

        while True:
            try:
                await self.run()
                await asyncio.sleep(interval * 60)
            except Exception as e:
                logger.error("Error in liquidation loop: %s", e)
                await asyncio.sleep(60)
