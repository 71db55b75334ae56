"""Relative strength index."""

from __future__ import annotations

from collections.abc import Iterable

from technicals.indicators.series import clean_values, require_positive_period, trailing_mean


def rsi(close_prices: Iterable[float], period: int = 14) -> float | None:
    """RSI from simple averages of the trailing `period` gains and losses.

    Returns 100 when the trailing average loss is exactly zero.
    """
    require_positive_period(period)
    prices = clean_values(close_prices)
    if len(prices) < period + 1:
        return None
    changes = prices.diff().iloc[1:]
    gains = changes.clip(lower=0.0)
    losses = (-changes).clip(lower=0.0)
    avg_gain = trailing_mean(gains, period)
    avg_loss = trailing_mean(losses, period)
    if avg_gain is None or avg_loss is None:
        return None
    if avg_loss == 0:
        return 100.0
    relative_strength = avg_gain / avg_loss
    return 100 - (100 / (1 + relative_strength))
