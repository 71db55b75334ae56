"""Bollinger Bands."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from technicals.domain.models import BollingerBands
from technicals.indicators.series import clean_values, trailing_mean


def bollinger_bands(
    close_prices: Iterable[float],
    period: int = 20,
    num_std: float = 2.0,
) -> BollingerBands | None:
    """SMA flanked by `num_std` population standard deviations of the trailing window."""
    if num_std < 0:
        raise ValueError("num_std must not be negative")
    prices = clean_values(close_prices)
    middle = trailing_mean(prices, period)
    if middle is None:
        return None
    window = prices.iloc[-period:]
    variance = float(((window - middle) ** 2).mean())
    deviation = float(np.sqrt(variance)) * num_std
    return BollingerBands(upper=middle + deviation, middle=middle, lower=middle - deviation)
