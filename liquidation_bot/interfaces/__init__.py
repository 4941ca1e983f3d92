"""Protocol interfaces for the liquidation bot."""
from .diagnostics import DiagnosticsSink
from .execution import LiquidationHandler
from .fetcher import MarketIndex, PositionIndex
from .notifier import Notifier
from .protocol_adapter import ProtocolAdapter

__all__ = [
    "DiagnosticsSink",
    "LiquidationHandler",
    "MarketIndex",
    "Notifier",
    "PositionIndex",
    "ProtocolAdapter",
]
