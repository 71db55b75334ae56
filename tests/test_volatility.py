from __future__ import annotations

import math

import pytest

from technicals.indicators.moving_average import sma
from technicals.indicators.volatility import bollinger_bands


def test_bollinger_of_constant_series_collapses() -> None:
    bands = bollinger_bands([50.0] * 25, 20, 2)

    assert bands is not None
    assert (bands.upper, bands.middle, bands.lower) == (50.0, 50.0, 50.0)


def test_bollinger_middle_is_sma() -> None:
    closes = [float(value) for value in range(3, 40, 2)] + [12.0, 17.0, 31.0]

    bands = bollinger_bands(closes, 20)

    assert bands is not None
    assert bands.middle == sma(closes, 20)


def test_bollinger_uses_population_deviation() -> None:
    closes = [float(value) for value in range(1, 21)]

    bands = bollinger_bands(closes, 20, 2)

    # population variance of 1..20 is (20**2 - 1) / 12
    deviation = math.sqrt(399 / 12)
    assert bands is not None
    assert bands.middle == 10.5
    assert bands.upper == pytest.approx(10.5 + 2 * deviation)
    assert bands.lower == pytest.approx(10.5 - 2 * deviation)


def test_bollinger_boundary_lengths() -> None:
    assert bollinger_bands([1.0] * 19, 20) is None
    assert bollinger_bands([1.0] * 20, 20) is not None
