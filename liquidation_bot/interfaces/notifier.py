"""Notifier protocol — run summaries and liquidation alerts."""
from typing import Protocol


class Notifier(Protocol):
    """Abstract interface for pushing bot events to an operator channel."""

    async def send_alert(self, message: str, subject: str = "") -> bool: ...

    async def send_log(self, message: str, silent: bool = True) -> bool: ...
