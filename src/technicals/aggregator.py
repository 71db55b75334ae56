"""Combine every indicator for one instrument into an IndicatorSet."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Self

from technicals.domain.models import (
    IndicatorSet,
    PriceSeries,
    RsiSignal,
    TrendAssessment,
    TrendDirection,
)
from technicals.errors import ConfigError, InsufficientDataError
from technicals.indicators import (
    bollinger_bands,
    ema,
    macd,
    rsi,
    sma,
    support_resistance,
    volume_analysis,
)

logger = logging.getLogger(__name__)

INDICATORS_KEY = "technicalIndicators"


@dataclass(frozen=True)
class IndicatorParams:
    """Periods and thresholds used by the aggregator."""

    sma_periods: tuple[int, int, int] = (20, 50, 200)
    ema_periods: tuple[int, int] = (12, 26)
    rsi_period: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    bollinger_period: int = 20
    bollinger_std: float = 2.0
    range_lookback: int = 20
    volume_lookback: int = 20
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0
    min_bars: int = 26

    def validate(self) -> Self:
        if len(self.sma_periods) != 3:
            raise ConfigError("sma_periods must hold short, medium, and long periods")
        if len(self.ema_periods) != 2:
            raise ConfigError("ema_periods must hold exactly two periods")
        periods = {
            "sma_periods": min(self.sma_periods),
            "ema_periods": min(self.ema_periods),
            "rsi_period": self.rsi_period,
            "macd_fast": self.macd_fast,
            "macd_slow": self.macd_slow,
            "macd_signal": self.macd_signal,
            "bollinger_period": self.bollinger_period,
            "range_lookback": self.range_lookback,
            "volume_lookback": self.volume_lookback,
            "min_bars": self.min_bars,
        }
        for name, value in periods.items():
            if value <= 0:
                raise ConfigError(f"{name} must be positive")
        if self.macd_fast >= self.macd_slow:
            raise ConfigError("macd_fast must be less than macd_slow")
        if self.bollinger_std < 0:
            raise ConfigError("bollinger_std must not be negative")
        if self.rsi_oversold >= self.rsi_overbought:
            raise ConfigError("rsi_oversold must be below rsi_overbought")
        return self


def default_indicator_params() -> IndicatorParams:
    return IndicatorParams()


def classify_trend(price: float | None, average: float | None) -> TrendDirection:
    """Label price against an average; bullish only when strictly above.

    Shared by every trend horizon, so an undefined side is INSUFFICIENT_DATA.
    """
    if price is None or average is None:
        return TrendDirection.INSUFFICIENT_DATA
    if price > average:
        return TrendDirection.BULLISH
    return TrendDirection.BEARISH


def classify_rsi(
    value: float | None,
    overbought: float = 70.0,
    oversold: float = 30.0,
) -> RsiSignal | None:
    """Strict threshold comparisons; exactly 70 or 30 is neutral."""
    if value is None:
        return None
    if value > overbought:
        return RsiSignal.OVERBOUGHT
    if value < oversold:
        return RsiSignal.OVERSOLD
    return RsiSignal.NEUTRAL


def compute(
    series: PriceSeries,
    params: IndicatorParams | None = None,
    now: datetime | None = None,
) -> IndicatorSet | None:
    """Compute the full indicator set, or None when the series is too short."""
    params = (params or default_indicator_params()).validate()
    try:
        series.require_bars(params.min_bars)
    except InsufficientDataError as exc:
        logger.info(
            "skip | Insufficient data for %s | bars %s/%s",
            exc.symbol,
            exc.available,
            exc.required,
        )
        return None

    closes = series.close_prices()
    short_period, medium_period, long_period = params.sma_periods
    fast_period, slow_period = params.ema_periods
    sma_short = sma(closes, short_period)
    sma_medium = sma(closes, medium_period)
    sma_long = sma(closes, long_period)
    rsi_value = rsi(closes, params.rsi_period)
    current_price = float(closes.iloc[-1]) if not closes.empty else None
    calculated_at = now or datetime.now(tz=UTC)

    indicators = IndicatorSet(
        sma20=sma_short,
        sma50=sma_medium,
        sma200=sma_long,
        ema12=ema(closes, fast_period),
        ema26=ema(closes, slow_period),
        rsi=rsi_value,
        macd=macd(closes, params.macd_fast, params.macd_slow, params.macd_signal),
        bollinger_bands=bollinger_bands(closes, params.bollinger_period, params.bollinger_std),
        support_resistance=support_resistance(series.bars, params.range_lookback),
        volume=volume_analysis(series.bars, params.volume_lookback),
        trend=TrendAssessment(
            short_term=classify_trend(current_price, sma_short),
            medium_term=classify_trend(current_price, sma_medium),
            long_term=classify_trend(current_price, sma_long),
        ),
        rsi_signal=classify_rsi(rsi_value, params.rsi_overbought, params.rsi_oversold),
        last_calculated=calculated_at.isoformat(),
    )
    logger.debug("%s: computed indicators from %s bars", series.symbol, len(series))
    return indicators


def attach_indicators(
    record: Mapping[str, Any],
    params: IndicatorParams | None = None,
    now: datetime | None = None,
) -> dict[str, Any] | None:
    """Return a copy of the record with indicators attached, or None when skipped.

    Raises MalformedInputError when the record cannot be parsed.
    """
    series = PriceSeries.from_record(record)
    indicators = compute(series, params, now=now)
    if indicators is None:
        return None
    updated = dict(record)
    updated[INDICATORS_KEY] = indicators.to_record()
    return updated
