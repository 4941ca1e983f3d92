"""Protocol adapters, keyed by protocol name."""
from typing import Any, Callable

from .morpho_aave import MorphoAaveAdapter

PROTOCOL_FACTORIES: dict[str, Callable[..., Any]] = {
    "morpho-aave": lambda client, cfg: MorphoAaveAdapter(client, cfg),
}

__all__ = ["MorphoAaveAdapter", "PROTOCOL_FACTORIES"]
