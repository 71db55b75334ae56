from __future__ import annotations

import pytest

from technicals.aggregator import IndicatorParams
from technicals.config import Settings, parse_periods, parse_symbols
from technicals.errors import ConfigError

ENV_KEYS = [
    "DATA_DIR",
    "SYMBOLS",
    "WORKERS",
    "LOG_LEVEL",
    "EVENTS_DIR",
    "CSV_DIR",
    "YAHOO_SUFFIX",
    "YAHOO_RANGE",
    "EXCLUDED_FILES",
    "SMA_PERIODS",
    "EMA_PERIODS",
    "RSI_PERIOD",
    "RSI_OVERBOUGHT",
    "RSI_OVERSOLD",
    "BOLLINGER_PERIOD",
    "BOLLINGER_STD",
    "RANGE_LOOKBACK",
    "VOLUME_LOOKBACK",
]


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("technicals.config.load_dotenv", lambda *args, **kwargs: None)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    settings = Settings.from_env()

    assert settings.data_dir == "data"
    assert settings.symbols == []
    assert settings.workers == 1
    assert settings.excluded_files == ("all-stocks.json", "metadata.json")
    assert settings.indicators == IndicatorParams()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("DATA_DIR", "idx-data")
    monkeypatch.setenv("SYMBOLS", "bbca, bbri,BBCA")
    monkeypatch.setenv("WORKERS", "4")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("YAHOO_SUFFIX", ".JK")
    monkeypatch.setenv("EXCLUDED_FILES", "index.json")
    monkeypatch.setenv("SMA_PERIODS", "10,30,100")
    monkeypatch.setenv("RSI_OVERBOUGHT", "80")
    monkeypatch.setenv("BOLLINGER_STD", "2.5")

    settings = Settings.from_env()

    assert settings.data_dir == "idx-data"
    assert settings.symbols == ["BBCA", "BBRI"]
    assert settings.workers == 4
    assert settings.log_level == "DEBUG"
    assert settings.yahoo_suffix == ".JK"
    assert settings.excluded_files == ("index.json",)
    assert settings.indicators.sma_periods == (10, 30, 100)
    assert settings.indicators.rsi_overbought == 80.0
    assert settings.indicators.bollinger_std == 2.5
    assert settings.indicators.rsi_period == 14


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("WORKERS", "0"),
        ("WORKERS", "many"),
        ("SMA_PERIODS", "20,50"),
        ("EMA_PERIODS", "12,x"),
        ("RSI_OVERSOLD", "75"),
    ],
)
def test_invalid_environment_values_raise(
    monkeypatch: pytest.MonkeyPatch, key: str, value: str
) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError):
        Settings.from_env()


def test_with_overrides_validates() -> None:
    settings = Settings()

    assert settings.with_overrides(workers=2).workers == 2
    with pytest.raises(ConfigError):
        settings.with_overrides(fetch=True)


def test_parse_helpers() -> None:
    assert parse_symbols(None, ["SPY"]) == ["SPY"]
    assert parse_symbols(" , ", ["SPY"]) == ["SPY"]
    assert parse_periods("12, 26", field_name="EMA_PERIODS", count=2) == (12, 26)
    assert parse_periods(" ", field_name="EMA_PERIODS", count=2) is None
