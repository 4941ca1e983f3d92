"""Liquidation bot for Morpho-style lending protocols."""

__version__ = "0.1.0"
