"""Domain models and event types."""

from .events import RunEvent
from .models import (
    Bar,
    BollingerBands,
    IndicatorSet,
    MacdResult,
    PriceSeries,
    RsiSignal,
    SupportResistance,
    TrendAssessment,
    TrendDirection,
    VolumeAnalysis,
    VolumeTrend,
)

__all__ = [
    "Bar",
    "BollingerBands",
    "IndicatorSet",
    "MacdResult",
    "PriceSeries",
    "RsiSignal",
    "RunEvent",
    "SupportResistance",
    "TrendAssessment",
    "TrendDirection",
    "VolumeAnalysis",
    "VolumeTrend",
]
