"""Yahoo Finance daily bar source."""

from __future__ import annotations

import re
from typing import Any

import pandas as pd

from technicals.domain.models import PriceSeries
from technicals.errors import DataProviderError, MalformedInputError


class YahooBarSource:
    """Fetch daily OHLCV history via yfinance.

    `suffix` maps a bare exchange code onto a Yahoo ticker, e.g. ".JK" turns
    BBCA into BBCA.JK. Records keep the bare symbol.
    """

    def __init__(self, period: str = "90d", suffix: str = "") -> None:
        self.period = period
        self.suffix = suffix.strip()

    def get_series(self, symbol: str) -> PriceSeries:
        try:
            import yfinance as yf
        except ImportError as exc:
            raise DataProviderError(
                "yfinance is required for --fetch. Install it with `pip install yfinance`."
            ) from exc

        ticker = self.resolve_ticker(symbol)
        try:
            history = yf.Ticker(ticker).history(
                period=self.period,
                interval="1d",
                auto_adjust=False,
                actions=False,
            )
        except Exception as exc:
            raise DataProviderError(
                f"yfinance request failed for {symbol} ({ticker}): {exc}"
            ) from exc

        frame = self._normalize_history(history, symbol, ticker)
        try:
            return PriceSeries.from_frame(symbol.strip().upper(), frame)
        except MalformedInputError as exc:
            raise DataProviderError(str(exc)) from exc

    def resolve_ticker(self, symbol: str) -> str:
        bare_symbol = symbol.strip().upper()
        if not self.suffix or "." in bare_symbol:
            return bare_symbol
        return f"{bare_symbol}{self.suffix.upper()}"

    @staticmethod
    def _normalize_history(history: Any, symbol: str, ticker: str) -> pd.DataFrame:
        if history is None:
            raise DataProviderError(f"yfinance returned no rows for {symbol} ({ticker})")
        frame = pd.DataFrame(history).copy()
        if frame.empty:
            raise DataProviderError(f"yfinance returned no rows for {symbol} ({ticker})")

        columns = {
            name: YahooBarSource._pick_column(frame, name)
            for name in ("open", "high", "low", "close", "volume")
        }
        if columns["close"] is None:
            columns["close"] = YahooBarSource._pick_column(frame, "adj_close")
        if columns["close"] is None:
            raise DataProviderError(
                f"yfinance payload missing close prices for {symbol} ({ticker})"
            )

        index = pd.DatetimeIndex(pd.to_datetime(frame.index))
        if index.tz is not None:
            index = index.tz_localize(None)
        normalized = pd.DataFrame(index=index)
        for name, column in columns.items():
            if column is None:
                normalized[name] = float("nan")
            else:
                normalized[name] = pd.to_numeric(frame[column], errors="coerce").to_numpy()
        normalized = normalized.sort_index(kind="mergesort")
        normalized = normalized.dropna(subset=["close"])
        normalized = normalized[~normalized.index.normalize().duplicated(keep="last")]
        if normalized.empty:
            raise DataProviderError(f"yfinance returned no close prices for {symbol} ({ticker})")
        return normalized

    @staticmethod
    def _pick_column(frame: pd.DataFrame, field: str) -> Any | None:
        for column in frame.columns:
            key = YahooBarSource._column_key(column)
            if key == field or key.startswith(f"{field}_"):
                return column
        return None

    @staticmethod
    def _column_key(value: Any) -> str:
        if isinstance(value, tuple):
            text = "_".join(str(part) for part in value if part is not None)
        else:
            text = str(value)
        return re.sub(r"[^a-zA-Z0-9]+", "_", text).strip("_").lower()
