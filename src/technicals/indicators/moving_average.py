"""Simple and exponential moving averages."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from technicals.indicators.series import clean_values, require_positive_period, trailing_mean


def sma(values: Iterable[float], period: int) -> float | None:
    """Arithmetic mean of the last `period` values."""
    return trailing_mean(clean_values(values), period)


def ema_series(values: Iterable[float], period: int) -> pd.Series:
    """EMA emitted once per element, starting at index `period - 1`.

    The filter is seeded with the mean of the first `period` values, so every
    output depends on the full history from index 0. Pass the complete causal
    history rather than a trailing slice.
    """
    require_positive_period(period)
    prices = clean_values(values)
    if len(prices) < period:
        return pd.Series(dtype=float)
    multiplier = 2 / (period + 1)
    current = float(prices.iloc[:period].mean())
    emitted = [current]
    for value in prices.iloc[period:].tolist():
        current = (value - current) * multiplier + current
        emitted.append(current)
    return pd.Series(emitted, index=prices.index[period - 1 :], dtype=float)


def ema(values: Iterable[float], period: int) -> float | None:
    """EMA as of the last element."""
    emitted = ema_series(values, period)
    if emitted.empty:
        return None
    return float(emitted.iloc[-1])
