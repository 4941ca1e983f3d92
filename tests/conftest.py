"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from decimal import Decimal
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from liquidation_bot.config import (
    AppConfig,
    BotConfig,
    ChainConfig,
    FetcherConfig,
    LiquidatorConfig,
    NotificationsConfig,
    ProtocolConfig,
    SwapConfig,
    SwapFeesConfig,
    TelegramConfig,
)
from liquidation_bot.fixed_point import WAD
from liquidation_bot.models import MarketBalance, MaxLiquidation

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
USDT = "0xdac17f958d2ee523a2206206994597c13d831ec7"
TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x2222222222222222222222222222222222222222"


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def assets() -> SimpleNamespace:
    return SimpleNamespace(
        weth=WETH, dai=DAI, usdc=USDC, usdt=USDT, token_a=TOKEN_A, token_b=TOKEN_B
    )


@pytest.fixture()
def sample_bot_config() -> BotConfig:
    return BotConfig(
        profitable_threshold_usd=Decimal("1"),
        batch_size=15,
        max_concurrency=10,
        page_delay_seconds=0.0,
        interval_minutes=1,
    )


@pytest.fixture()
def sample_swap_config() -> SwapConfig:
    return SwapConfig(
        fees=SwapFeesConfig(classic=500, stable=100, exotic=3000),
        base_asset=WETH,
        stablecoins=frozenset({DAI, USDC, USDT}),
        underlyings={
            "0xaaaa00000000000000000000000000000000000a": DAI,
            "0xaaaa00000000000000000000000000000000000b": WETH,
        },
    )


@pytest.fixture()
def sample_protocol_config() -> ProtocolConfig:
    return ProtocolConfig(
        name="morpho-aave",
        contracts={
            "lens": "0x507fa343d0a90786d86c7cd885f5c49263a91ff4",
            "oracle": "0xa50ba011c48153de246e5192c8f9258a2ba79ca9",
        },
        close_factor_bps=5000,
    )


@pytest.fixture()
def sample_app_config(
    sample_bot_config: BotConfig,
    sample_swap_config: SwapConfig,
    sample_protocol_config: ProtocolConfig,
) -> AppConfig:
    return AppConfig(
        bot=sample_bot_config,
        fetcher=FetcherConfig(graph_url="https://graph.example.com", page_size=2),
        chain=ChainConfig(rpc_endpoints=("https://rpc1.example.com",), rpc_timeout=10),
        protocol=sample_protocol_config,
        swap=sample_swap_config,
        liquidator=LiquidatorConfig(),
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True,
                alert_bot_token="fake-alert-token",
                log_bot_token="fake-log-token",
                chat_id="12345",
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    bot:
      profitable_threshold_usd: 2.5
      batch_size: 20
      max_concurrency: 8
    fetcher:
      graph_url: "https://graph.example.com"
      page_size: 500
    chain:
      chain_id: 1
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
    protocol:
      name: morpho-aave
      contracts:
        lens: "0xLENS"
        oracle: "0xORACLE"
      markets: ["0xAAA", "0xBBB"]
    swap:
      fees: {classic: 500, stable: 100, exotic: 3000}
      base_asset: "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
      stablecoins: ["0x6B175474E89094C44Da98b954EedeAC495271d0F"]
      underlyings:
        "0xAAA": "0x6B175474E89094C44Da98b954EedeAC495271d0F"
    liquidator:
      contract: "0xLIQ"
      private_key: "${TEST_PRIVATE_KEY}"
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: "999"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_balance() -> Callable[..., MarketBalance]:
    def _make(
        market: str,
        supply_usd: int = 0,
        borrow_usd: int = 0,
        bonus: int = 10_500,
        price: int = WAD,
    ) -> MarketBalance:
        return MarketBalance(
            market=market,
            total_supply=supply_usd,
            total_borrow=borrow_usd,
            supply_usd=supply_usd,
            borrow_usd=borrow_usd,
            price=price,
            liquidation_bonus=bonus,
        )

    return _make


# ---------------------------------------------------------------------------
# Fake protocol adapter
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_adapter() -> Callable[..., AsyncMock]:
    """Build an AsyncMock adapter from per-market/per-user data.

    ``markets`` maps market -> {"bonus": int, "price": int}; ``balances`` maps
    (market, user) -> (supply, borrow) in 18-decimal units priced at WAD.
    """

    def _make(
        markets: dict[str, dict[str, int]],
        balances: dict[tuple[str, str], tuple[int, int]] | None = None,
        health_factors: dict[str, int] | None = None,
    ) -> AsyncMock:
        balances = balances or {}
        health_factors = health_factors or {}
        adapter = AsyncMock()

        async def supply(market: str, user: str) -> int:
            return balances.get((market, user), (0, 0))[0]

        async def borrow(market: str, user: str) -> int:
            return balances.get((market, user), (0, 0))[1]

        async def normalize(market: str, amounts: list[int]) -> tuple[int, list[int]]:
            price = markets[market].get("price", WAD)
            return price, [a * price // WAD for a in amounts]

        async def bonus(market: str) -> int:
            return markets[market].get("bonus", 0)

        async def to_usd(market: str, amount: int, price: int) -> int:
            return amount * price // WAD

        async def max_liq(debt: Any, collateral: Any) -> MaxLiquidation:
            return MaxLiquidation(
                amount=debt.total_borrow // 2, reward_usd=debt.borrow_usd // 2
            )

        async def health(user: str) -> int:
            return health_factors.get(user, 2 * WAD)

        adapter.get_supply_balance.side_effect = supply
        adapter.get_borrow_balance.side_effect = borrow
        adapter.normalize_to_usd.side_effect = normalize
        adapter.get_liquidation_bonus.side_effect = bonus
        adapter.to_usd.side_effect = to_usd
        adapter.compute_max_liquidation.side_effect = max_liq
        adapter.get_health_factor.side_effect = health
        return adapter

    return _make
