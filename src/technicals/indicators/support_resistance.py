"""Support and resistance from recent extremes.

This is a coarse estimate: the lowest low and highest high of the trailing
lookback window. No pivot detection or level clustering.
"""

from __future__ import annotations

from collections.abc import Sequence

from technicals.domain.models import Bar, SupportResistance
from technicals.indicators.series import clean_values, require_positive_period


def support_resistance(bars: Sequence[Bar], lookback: int = 20) -> SupportResistance | None:
    require_positive_period(lookback, name="lookback")
    if len(bars) < lookback:
        return None
    recent = bars[-lookback:]
    highs = clean_values(bar.high for bar in recent)
    lows = clean_values(bar.low for bar in recent)
    return SupportResistance(
        support=None if lows.empty else float(lows.min()),
        resistance=None if highs.empty else float(highs.max()),
    )
