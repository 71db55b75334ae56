"""Indicator implementations."""

from .moving_average import ema, ema_series, sma
from .oscillator import rsi
from .support_resistance import support_resistance
from .trend import macd, macd_series
from .volatility import bollinger_bands
from .volume import volume_analysis

__all__ = [
    "bollinger_bands",
    "ema",
    "ema_series",
    "macd",
    "macd_series",
    "rsi",
    "sma",
    "support_resistance",
    "volume_analysis",
]
