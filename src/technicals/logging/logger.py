"""Concise human-readable run logger."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("technicals")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def run_started(self, run_id: str, action: str, total: int) -> None:
        self._logger.info("start | %s | %s record(s) | run %s", action, total, run_id)

    def calculated(self, symbol: str, details: Mapping[str, Any] | None = None) -> None:
        parts = [f"✓ {symbol} indicators calculated"]
        if details:
            rsi = self._as_float(details.get("rsi"))
            if rsi is not None:
                parts.append(f"rsi {rsi:.2f}")
            signal = details.get("rsiSignal")
            if isinstance(signal, str):
                parts.append(signal)
        self._logger.info(" | ".join(parts))

    def imported(self, symbol: str, bars: int, source: str) -> None:
        self._logger.info("✓ %s data saved | %s bars | %s", symbol, bars, source)

    def failed(self, symbol: str, message: str) -> None:
        self._logger.warning("✗ %s | %s", symbol, message)

    def run_completed(self, action: str, processed: int, total: int) -> None:
        self._logger.info("Complete! %s %s/%s", action, processed, total)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _as_float(value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        return None
