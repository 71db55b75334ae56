"""MACD line, signal line, and histogram."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from technicals.domain.models import MacdResult
from technicals.indicators.moving_average import ema, ema_series
from technicals.indicators.series import clean_values, require_positive_period


def macd_series(
    close_prices: Iterable[float],
    fast_period: int = 12,
    slow_period: int = 26,
) -> pd.Series:
    """MACD value for every prefix of at least `slow_period` prices.

    Both EMAs are seeded from index 0, so one forward pass yields the same
    values as recomputing each prefix from scratch.
    """
    require_positive_period(fast_period, name="fast_period")
    require_positive_period(slow_period, name="slow_period")
    if fast_period >= slow_period:
        raise ValueError("fast_period must be less than slow_period")
    prices = clean_values(close_prices)
    fast_line = ema_series(prices, fast_period)
    slow_line = ema_series(prices, slow_period)
    return (fast_line - slow_line).dropna().reset_index(drop=True)


def macd(
    close_prices: Iterable[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MacdResult | None:
    """Current MACD reading, or None with fewer than `slow_period` prices.

    Signal and histogram stay None until there are `signal_period` MACD values.
    """
    require_positive_period(signal_period, name="signal_period")
    values = macd_series(close_prices, fast_period, slow_period)
    if values.empty:
        return None
    line = float(values.iloc[-1])
    signal = ema(values, signal_period)
    histogram = None if signal is None else line - signal
    return MacdResult(macd=line, signal=signal, histogram=histogram)
