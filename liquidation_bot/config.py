"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

WETH_MAINNET = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"

SUPPORTED_PROTOCOLS = ("morpho-aave",)

MARKET_SOURCES = ("graph", "lens")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BotConfig:
    profitable_threshold_usd: Decimal = Decimal("1")
    batch_size: int = 15
    max_concurrency: int = 50
    page_delay_seconds: float = 0.1
    interval_minutes: int = 10


@dataclass(frozen=True)
class FetcherConfig:
    graph_url: str = ""
    page_size: int = 1000
    timeout: int = 30


@dataclass(frozen=True)
class ChainConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30
    chain_id: int = 1


@dataclass(frozen=True)
class ProtocolConfig:
    name: str = "morpho-aave"
    contracts: dict[str, str] = field(default_factory=dict)
    close_factor_bps: int = 5000
    markets: tuple[str, ...] = ()
    market_source: str = "graph"


@dataclass(frozen=True)
class SwapFeesConfig:
    classic: int = 500
    stable: int = 100
    exotic: int = 3000


@dataclass(frozen=True)
class SwapConfig:
    fees: SwapFeesConfig = field(default_factory=SwapFeesConfig)
    base_asset: str = WETH_MAINNET
    stablecoins: frozenset[str] = frozenset()
    underlyings: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LiquidatorConfig:
    contract: str = ""
    private_key: str = ""
    stake_tokens: bool = True
    gas_limit: int = 3_000_000
    receipt_timeout: int = 180


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    log_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)


@dataclass(frozen=True)
class AppConfig:
    bot: BotConfig = field(default_factory=BotConfig)
    fetcher: FetcherConfig = field(default_factory=FetcherConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    swap: SwapConfig = field(default_factory=SwapConfig)
    liquidator: LiquidatorConfig = field(default_factory=LiquidatorConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")
_ADDRESS_RE = re.compile(r"0x[0-9a-f]{40}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


def _lower_keys(raw: dict[str, Any]) -> dict[str, str]:
    return {str(k).lower(): str(v).lower() for k, v in raw.items()}


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_bot(raw: dict[str, Any]) -> BotConfig:
    return BotConfig(
        profitable_threshold_usd=Decimal(str(raw.get("profitable_threshold_usd", "1"))),
        batch_size=int(raw.get("batch_size", 15)),
        max_concurrency=int(raw.get("max_concurrency", 50)),
        page_delay_seconds=float(raw.get("page_delay_seconds", 0.1)),
        interval_minutes=int(raw.get("interval_minutes", 10)),
    )


def _build_fetcher(raw: dict[str, Any]) -> FetcherConfig:
    return FetcherConfig(
        graph_url=raw.get("graph_url", ""),
        page_size=int(raw.get("page_size", 1000)),
        timeout=int(raw.get("timeout", 30)),
    )


def _build_chain(raw: dict[str, Any]) -> ChainConfig:
    return ChainConfig(
        rpc_endpoints=tuple(e for e in raw.get("rpc_endpoints", []) if e),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
        chain_id=int(raw.get("chain_id", 1)),
    )


def _build_protocol(raw: dict[str, Any]) -> ProtocolConfig:
    return ProtocolConfig(
        name=raw.get("name", "morpho-aave"),
        contracts=dict(raw.get("contracts", {})),
        close_factor_bps=int(raw.get("close_factor_bps", 5000)),
        markets=tuple(m.lower() for m in raw.get("markets", [])),
        market_source=str(raw.get("market_source", "graph")).lower(),
    )


def _build_swap(raw: dict[str, Any]) -> SwapConfig:
    fees = raw.get("fees", {})
    return SwapConfig(
        fees=SwapFeesConfig(
            classic=int(fees.get("classic", 500)),
            stable=int(fees.get("stable", 100)),
            exotic=int(fees.get("exotic", 3000)),
        ),
        base_asset=str(raw.get("base_asset") or WETH_MAINNET).lower(),
        stablecoins=frozenset(s.lower() for s in raw.get("stablecoins", [])),
        underlyings=_lower_keys(raw.get("underlyings", {})),
    )


def _build_liquidator(raw: dict[str, Any]) -> LiquidatorConfig:
    return LiquidatorConfig(
        contract=raw.get("contract", ""),
        private_key=raw.get("private_key", ""),
        stake_tokens=bool(raw.get("stake_tokens", True)),
        gas_limit=int(raw.get("gas_limit", 3_000_000)),
        receipt_timeout=int(raw.get("receipt_timeout", 180)),
    )


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram", {})
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            log_bot_token=tg.get("log_bot_token", ""),
            chat_id=tg.get("chat_id", ""),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        bot=_build_bot(raw.get("bot") or {}),
        fetcher=_build_fetcher(raw.get("fetcher") or {}),
        chain=_build_chain(raw.get("chain") or {}),
        protocol=_build_protocol(raw.get("protocol") or {}),
        swap=_build_swap(raw.get("swap") or {}),
        liquidator=_build_liquidator(raw.get("liquidator") or {}),
        notifications=_build_notifications(raw.get("notifications") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.fetcher.graph_url:
        raise ValueError("fetcher.graph_url must be configured")

    if not cfg.chain.rpc_endpoints:
        raise ValueError("At least one RPC endpoint must be configured")

    if cfg.bot.batch_size < 1:
        raise ValueError("bot.batch_size must be at least 1")

    if cfg.bot.max_concurrency < 1:
        raise ValueError("bot.max_concurrency must be at least 1")

    if cfg.bot.profitable_threshold_usd < 0:
        raise ValueError("bot.profitable_threshold_usd must not be negative")

    if not _ADDRESS_RE.fullmatch(cfg.swap.base_asset):
        raise ValueError(f"swap.base_asset is not an address: {cfg.swap.base_asset}")

    if cfg.protocol.name not in SUPPORTED_PROTOCOLS:
        raise ValueError(f"Unknown protocol '{cfg.protocol.name}'")

    if cfg.protocol.market_source not in MARKET_SOURCES:
        raise ValueError(
            f"protocol.market_source must be one of {MARKET_SOURCES}, "
            f"got '{cfg.protocol.market_source}'"
        )

    if not 0 < cfg.protocol.close_factor_bps <= 10_000:
        raise ValueError("protocol.close_factor_bps must be in (0, 10000]")
