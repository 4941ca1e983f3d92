"""Service modules"""
from .dispatcher import LiquidationDispatcher
from .market_selector import MarketSelector
from .orchestrator import LiquidationOrchestrator
from .profitability import ProfitabilityEvaluator
from .routing import SwapRouteBuilder
from .scanner import UserScanner

__all__ = [
    "LiquidationDispatcher",
    "LiquidationOrchestrator",
    "MarketSelector",
    "ProfitabilityEvaluator",
    "SwapRouteBuilder",
    "UserScanner",
]
