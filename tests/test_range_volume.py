from __future__ import annotations

from datetime import date, timedelta

import pytest

from technicals.domain.models import Bar, VolumeTrend
from technicals.indicators.support_resistance import support_resistance
from technicals.indicators.volume import volume_analysis


def _bars(count: int, **overrides: list[float | None]) -> list[Bar]:
    start = date(2024, 1, 1)
    bars: list[Bar] = []
    for index in range(count):
        fields = {"high": 10.0 + index, "low": 5.0 + index, "close": 8.0 + index, "volume": 100.0}
        for name, values in overrides.items():
            fields[name] = values[index]
        bars.append(Bar(date=start + timedelta(days=index), **fields))
    return bars


def test_support_resistance_uses_trailing_extremes() -> None:
    bars = _bars(25)

    levels = support_resistance(bars, 20)

    assert levels is not None
    assert levels.support == 10.0
    assert levels.resistance == 34.0


def test_support_resistance_skips_absent_extremes() -> None:
    highs: list[float | None] = [10.0] * 20
    highs[-1] = None
    highs[3] = 99.0
    lows: list[float | None] = [None] * 20

    levels = support_resistance(_bars(20, high=highs, low=lows), 20)

    assert levels is not None
    assert levels.resistance == 99.0
    assert levels.support is None


def test_support_resistance_boundary_lengths() -> None:
    assert support_resistance(_bars(19), 20) is None
    assert support_resistance(_bars(20), 20) is not None


def test_volume_above_average_scenario() -> None:
    volumes: list[float | None] = [100.0] * 19 + [150.0]

    analysis = volume_analysis(_bars(20, volume=volumes), 20)

    assert analysis is not None
    assert analysis.average == 102.5
    assert analysis.current == 150.0
    assert analysis.ratio == pytest.approx(1.463, abs=1e-3)
    assert analysis.trend == VolumeTrend.ABOVE_AVERAGE


def test_volume_equal_to_average_is_below_average() -> None:
    analysis = volume_analysis(_bars(20), 20)

    assert analysis is not None
    assert analysis.ratio == 1.0
    assert analysis.trend == VolumeTrend.BELOW_AVERAGE


def test_volume_filters_absent_entries() -> None:
    volumes: list[float | None] = [100.0] * 18 + [400.0, None]

    analysis = volume_analysis(_bars(20, volume=volumes), 20)

    assert analysis is not None
    assert analysis.current == 400.0
    assert analysis.average == pytest.approx(2200.0 / 19)


def test_volume_is_undefined_without_data() -> None:
    assert volume_analysis(_bars(19), 20) is None
    assert volume_analysis(_bars(20, volume=[None] * 20), 20) is None


def test_zero_average_volume_has_no_ratio() -> None:
    analysis = volume_analysis(_bars(20, volume=[0.0] * 20), 20)

    assert analysis is not None
    assert analysis.ratio is None
    assert analysis.trend == VolumeTrend.BELOW_AVERAGE
