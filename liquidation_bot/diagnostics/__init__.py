"""Diagnostics sinks."""
from .logging_sink import LoggingDiagnostics

__all__ = ["LoggingDiagnostics"]
