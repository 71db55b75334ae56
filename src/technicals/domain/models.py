"""Price series and indicator result models."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any, Self

import pandas as pd

from technicals.errors import InsufficientDataError, MalformedInputError

OHLCV_FIELDS = ("open", "high", "low", "close", "volume")


class TrendDirection(StrEnum):
    """Price position relative to a moving average."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    INSUFFICIENT_DATA = "insufficient data"


class RsiSignal(StrEnum):
    """RSI zone classification."""

    OVERBOUGHT = "overbought"
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"


class VolumeTrend(StrEnum):
    """Current volume relative to the lookback average."""

    ABOVE_AVERAGE = "above average"
    BELOW_AVERAGE = "below average"


def as_optional_float(value: Any) -> float | None:
    """Coerce a raw field to a finite float, mapping anything else to None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def parse_bar_date(value: Any) -> date:
    """Parse a bar date from ISO strings, dates, or timestamps."""
    if value is None:
        raise MalformedInputError("bar is missing a date")
    try:
        parsed = pd.Timestamp(value)
    except (ValueError, TypeError) as exc:
        raise MalformedInputError(f"unparseable bar date {value!r}") from exc
    if pd.isna(parsed):
        raise MalformedInputError(f"unparseable bar date {value!r}")
    return parsed.date()


@dataclass(frozen=True)
class Bar:
    """One trading day. Absent fields are None, never zero."""

    date: date
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    volume: float | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> Self:
        if not isinstance(raw, Mapping):
            raise MalformedInputError(f"bar must be an object, got {type(raw).__name__}")
        return cls(
            date=parse_bar_date(raw.get("date")),
            open=as_optional_float(raw.get("open")),
            high=as_optional_float(raw.get("high")),
            low=as_optional_float(raw.get("low")),
            close=as_optional_float(raw.get("close")),
            volume=as_optional_float(raw.get("volume")),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class PriceSeries:
    """Daily bars for one instrument, strictly ascending by date."""

    symbol: str
    bars: tuple[Bar, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.symbol or not self.symbol.strip():
            raise MalformedInputError("price series requires a symbol")
        for previous, current in zip(self.bars, self.bars[1:]):
            if current.date <= previous.date:
                raise MalformedInputError(
                    f"{self.symbol}: bars must be strictly ascending by date "
                    f"({previous.date.isoformat()} then {current.date.isoformat()})"
                )

    def __len__(self) -> int:
        return len(self.bars)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Self:
        """Build a series from a stored instrument record."""
        if not isinstance(record, Mapping):
            raise MalformedInputError("instrument record must be a JSON object")
        symbol = record.get("symbol")
        if not isinstance(symbol, str) or not symbol.strip():
            raise MalformedInputError("instrument record is missing 'symbol'")
        raw_bars = record.get("historicalData")
        if raw_bars is None:
            raw_bars = []
        if not isinstance(raw_bars, Sequence) or isinstance(raw_bars, (str, bytes)):
            raise MalformedInputError(f"{symbol}: 'historicalData' must be a list of bars")
        try:
            bars = tuple(Bar.from_mapping(raw) for raw in raw_bars)
        except MalformedInputError as exc:
            raise MalformedInputError(f"{symbol}: {exc}") from exc
        return cls(symbol=symbol.strip(), bars=bars)

    @classmethod
    def from_frame(cls, symbol: str, frame: pd.DataFrame) -> Self:
        """Build a series from an OHLCV frame indexed by datetime."""
        bars: list[Bar] = []
        for index, row in frame.sort_index().iterrows():
            bars.append(
                Bar(
                    date=parse_bar_date(index),
                    **{name: as_optional_float(row.get(name)) for name in OHLCV_FIELDS},
                )
            )
        return cls(symbol=symbol, bars=tuple(bars))

    def close_prices(self) -> pd.Series:
        """Ordered non-absent closes."""
        closes = [bar.close for bar in self.bars if bar.close is not None]
        return pd.Series(closes, dtype=float)

    def require_bars(self, minimum: int) -> None:
        if len(self.bars) < minimum:
            raise InsufficientDataError(self.symbol, minimum, len(self.bars))

    def to_record_bars(self) -> list[dict[str, Any]]:
        return [bar.to_record() for bar in self.bars]


@dataclass(frozen=True)
class MacdResult:
    """MACD line, signal line, and histogram."""

    macd: float
    signal: float | None
    histogram: float | None

    def to_record(self) -> dict[str, Any]:
        return {"macd": self.macd, "signal": self.signal, "histogram": self.histogram}


@dataclass(frozen=True)
class BollingerBands:
    upper: float
    middle: float
    lower: float

    def to_record(self) -> dict[str, Any]:
        return {"upper": self.upper, "middle": self.middle, "lower": self.lower}


@dataclass(frozen=True)
class SupportResistance:
    support: float | None
    resistance: float | None

    def to_record(self) -> dict[str, Any]:
        return {"support": self.support, "resistance": self.resistance}


@dataclass(frozen=True)
class VolumeAnalysis:
    current: float
    average: float
    ratio: float | None
    trend: VolumeTrend

    def to_record(self) -> dict[str, Any]:
        return {
            "current": self.current,
            "average": self.average,
            "ratio": self.ratio,
            "trend": self.trend.value,
        }


@dataclass(frozen=True)
class TrendAssessment:
    short_term: TrendDirection
    medium_term: TrendDirection
    long_term: TrendDirection

    def to_record(self) -> dict[str, Any]:
        return {
            "shortTerm": self.short_term.value,
            "mediumTerm": self.medium_term.value,
            "longTerm": self.long_term.value,
        }


def _optional_record(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    return value.to_record()


@dataclass(frozen=True)
class IndicatorSet:
    """Everything computed for one instrument in one run."""

    sma20: float | None
    sma50: float | None
    sma200: float | None
    ema12: float | None
    ema26: float | None
    rsi: float | None
    macd: MacdResult | None
    bollinger_bands: BollingerBands | None
    support_resistance: SupportResistance | None
    volume: VolumeAnalysis | None
    trend: TrendAssessment
    rsi_signal: RsiSignal | None
    last_calculated: str

    def to_record(self) -> dict[str, Any]:
        """Serialize with every key present; undefined values become null."""
        return {
            "sma20": self.sma20,
            "sma50": self.sma50,
            "sma200": self.sma200,
            "ema12": self.ema12,
            "ema26": self.ema26,
            "rsi": self.rsi,
            "macd": _optional_record(self.macd),
            "bollingerBands": _optional_record(self.bollinger_bands),
            "supportResistance": _optional_record(self.support_resistance),
            "volume": _optional_record(self.volume),
            "trend": self.trend.to_record(),
            "rsiSignal": None if self.rsi_signal is None else self.rsi_signal.value,
            "lastCalculated": self.last_calculated,
        }
