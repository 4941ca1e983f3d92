"""Position and market index clients."""
from .graph import GraphFetcher
from .static import StaticMarketIndex

__all__ = ["GraphFetcher", "StaticMarketIndex"]
