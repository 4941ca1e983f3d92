"""Diagnostics sink that writes records through the logging module."""
from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def _flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, Any]]:
    rows: list[tuple[str, Any]] = []
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            rows.extend(_flatten(value, name))
        else:
            rows.append((name, value))
    return rows


class LoggingDiagnostics:
    """Render diagnostic events and tables as log lines."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    def record(self, event: str, **fields: Any) -> None:
        if fields:
            details = " ".join(f"{k}={v}" for k, v in fields.items())
            self._logger.info("%s | %s", event, details)
        else:
            self._logger.info("%s", event)

    def record_table(self, data: dict[str, Any]) -> None:
        rows = _flatten(data)
        if not rows:
            return
        width = max(len(name) for name, _ in rows)
        self._logger.info("-" * 60)
        for name, value in rows:
            self._logger.info("  %s  %s", name.ljust(width), value)
        self._logger.info("-" * 60)
