"""Diagnostics sink protocol — fire-and-forget structured records."""
from typing import Any, Protocol


class DiagnosticsSink(Protocol):
    """Abstract interface for observability records."""

    def record(self, event: str, **fields: Any) -> None: ...

    def record_table(self, data: dict[str, Any]) -> None: ...
