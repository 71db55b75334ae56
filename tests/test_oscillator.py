from __future__ import annotations

import pytest

from technicals.indicators.oscillator import rsi


def test_rsi_is_100_for_strictly_increasing_prices() -> None:
    assert rsi(list(range(1, 31)), 14) == 100.0


def test_rsi_boundary_lengths() -> None:
    assert rsi(list(range(1, 15)), 14) is None
    assert rsi(list(range(1, 16)), 14) == 100.0


def test_rsi_uses_simple_averages_of_trailing_changes() -> None:
    # trailing changes (-1, 2): avg gain 1.0, avg loss 0.5 -> RS 2
    value = rsi([10.0, 11.0, 10.0, 12.0], 2)

    assert value == pytest.approx(100 - 100 / 3)


def test_rsi_ignores_changes_outside_trailing_window() -> None:
    # the early crash is older than the 2-change window
    assert rsi([100.0, 1.0, 2.0, 3.0], 2) == 100.0


def test_rsi_is_zero_for_strictly_decreasing_prices() -> None:
    assert rsi([float(value) for value in range(30, 0, -1)], 14) == 0.0


def test_rsi_stays_within_bounds() -> None:
    closes = [44.3, 44.1, 44.2, 43.6, 44.3, 44.8, 45.1, 45.4, 45.8, 46.1, 45.9, 46.2, 45.6, 46.3]
    closes += [46.3, 46.0, 46.4, 46.2, 45.6, 46.2]

    value = rsi(closes, 14)

    assert value is not None
    assert 0.0 <= value <= 100.0
