from .adapter import MorphoAaveAdapter

__all__ = ["MorphoAaveAdapter"]
