"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Self

from dotenv import load_dotenv

from technicals.aggregator import IndicatorParams
from technicals.errors import ConfigError

DEFAULT_EXCLUDED_FILES = ("all-stocks.json", "metadata.json")


def parse_symbols(value: str | None, default: list[str] | None = None) -> list[str]:
    """Parse comma-separated symbols, deduplicated in order."""
    fallback = list(default or [])
    if not value:
        return fallback
    symbols: list[str] = []
    for item in value.split(","):
        symbol = item.strip().upper()
        if symbol and symbol not in symbols:
            symbols.append(symbol)
    return symbols or fallback


def parse_names(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse comma-separated file names, keeping case."""
    if value is None:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


def parse_periods(value: str | None, *, field_name: str, count: int) -> tuple[int, ...] | None:
    """Parse a fixed-length comma-separated list of positive integers."""
    if value is None or not value.strip():
        return None
    try:
        periods = tuple(int(item.strip()) for item in value.split(","))
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be comma-separated integers") from exc
    if len(periods) != count:
        raise ConfigError(f"{field_name} must list exactly {count} periods")
    return periods


def _env_number(name: str, cast: type[int] | type[float]) -> int | float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


def indicator_params_from_env() -> IndicatorParams:
    """Overlay indicator constants from the environment onto defaults."""
    overrides: dict[str, object] = {}
    sma_periods = parse_periods(os.getenv("SMA_PERIODS"), field_name="SMA_PERIODS", count=3)
    if sma_periods is not None:
        overrides["sma_periods"] = sma_periods
    ema_periods = parse_periods(os.getenv("EMA_PERIODS"), field_name="EMA_PERIODS", count=2)
    if ema_periods is not None:
        overrides["ema_periods"] = ema_periods
    numeric_fields = {
        "RSI_PERIOD": ("rsi_period", int),
        "RSI_OVERBOUGHT": ("rsi_overbought", float),
        "RSI_OVERSOLD": ("rsi_oversold", float),
        "BOLLINGER_PERIOD": ("bollinger_period", int),
        "BOLLINGER_STD": ("bollinger_std", float),
        "RANGE_LOOKBACK": ("range_lookback", int),
        "VOLUME_LOOKBACK": ("volume_lookback", int),
    }
    for env_name, (attribute, cast) in numeric_fields.items():
        value = _env_number(env_name, cast)
        if value is not None:
            overrides[attribute] = value
    return replace(IndicatorParams(), **overrides).validate()


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    data_dir: str = "data"
    symbols: list[str] = field(default_factory=list)
    workers: int = 1
    log_level: str = "INFO"
    events_dir: str = "runs"
    csv_dir: str | None = None
    fetch: bool = False
    yahoo_suffix: str = ""
    yahoo_range: str = "90d"
    excluded_files: tuple[str, ...] = DEFAULT_EXCLUDED_FILES
    indicators: IndicatorParams = field(default_factory=IndicatorParams)

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        workers = _env_number("WORKERS", int)
        raw = cls(
            data_dir=str(os.getenv("DATA_DIR", "data")).strip(),
            symbols=parse_symbols(os.getenv("SYMBOLS")),
            workers=1 if workers is None else int(workers),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            events_dir=str(os.getenv("EVENTS_DIR", "runs")).strip(),
            csv_dir=os.getenv("CSV_DIR", "").strip() or None,
            yahoo_suffix=str(os.getenv("YAHOO_SUFFIX", "")).strip(),
            yahoo_range=str(os.getenv("YAHOO_RANGE", "90d")).strip(),
            excluded_files=parse_names(os.getenv("EXCLUDED_FILES"), DEFAULT_EXCLUDED_FILES),
            indicators=indicator_params_from_env(),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    def validate(self) -> Self:
        """Validate settings fields."""
        if not self.data_dir:
            raise ConfigError("data_dir must not be empty")
        if self.workers <= 0:
            raise ConfigError("workers must be positive")
        if self.fetch and not self.symbols:
            raise ConfigError("fetching from Yahoo Finance requires at least one symbol")
        if not self.yahoo_range:
            raise ConfigError("yahoo_range must not be empty")
        self.indicators.validate()
        return self
