"""Liquidation execution handlers."""
from .liquidator import LiquidatorHandler
from .read_only import ReadOnlyHandler

__all__ = ["LiquidatorHandler", "ReadOnlyHandler"]
