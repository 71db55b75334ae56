"""Windowed reduction primitives shared by the indicator modules."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import pandas as pd


def clean_values(values: Iterable[object]) -> pd.Series:
    """Return finite floats in input order, dropping absent or non-numeric entries."""
    raw = values if isinstance(values, pd.Series) else pd.Series(list(values), dtype=object)
    numeric = pd.to_numeric(raw, errors="coerce").astype(float)
    numeric = numeric[np.isfinite(numeric.to_numpy())]
    return numeric.reset_index(drop=True)


def require_positive_period(period: int, *, name: str = "period") -> None:
    if period <= 0:
        raise ValueError(f"{name} must be positive")


def trailing_mean(values: pd.Series, period: int) -> float | None:
    """Mean of the last `period` values, or None when fewer are available."""
    require_positive_period(period)
    if len(values) < period:
        return None
    return float(values.iloc[-period:].mean())
