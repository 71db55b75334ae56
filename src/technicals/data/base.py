"""Record store and bar source contracts."""

from __future__ import annotations

from typing import Any, Protocol

from technicals.domain.models import PriceSeries


class RecordStore(Protocol):
    """Persistence API for per-instrument records."""

    def list_keys(self) -> list[str]:
        """Return record keys in processing order."""

    def load(self, key: str) -> dict[str, Any]:
        """Read one record; raise MalformedInputError when unreadable."""

    def save(self, key: str, record: dict[str, Any]) -> None:
        """Rewrite one record in full."""


class BarSource(Protocol):
    """Interface for daily bar retrieval."""

    def get_series(self, symbol: str) -> PriceSeries:
        """Return ascending daily bars for a symbol."""
