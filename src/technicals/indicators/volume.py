"""Current-versus-average volume."""

from __future__ import annotations

from collections.abc import Sequence

from technicals.domain.models import Bar, VolumeAnalysis, VolumeTrend
from technicals.indicators.series import clean_values, require_positive_period


def volume_analysis(bars: Sequence[Bar], lookback: int = 20) -> VolumeAnalysis | None:
    """Compare the latest present volume with the mean of the trailing window.

    Equal volumes classify as below average.
    """
    require_positive_period(lookback, name="lookback")
    if len(bars) < lookback:
        return None
    volumes = clean_values(bar.volume for bar in bars[-lookback:])
    if volumes.empty:
        return None
    average = float(volumes.mean())
    current = float(volumes.iloc[-1])
    trend = VolumeTrend.ABOVE_AVERAGE if current > average else VolumeTrend.BELOW_AVERAGE
    return VolumeAnalysis(
        current=current,
        average=average,
        ratio=current / average if average != 0 else None,
        trend=trend,
    )
