from __future__ import annotations

from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from technicals.data.csv_data import CsvBarSource
from technicals.errors import DataProviderError


def _write_csv(path: Path) -> None:
    frame = pd.DataFrame(
        {
            "Date": ["2025-01-03", "2025-01-01", "2025-01-02", "2025-01-02"],
            "Open": [102.0, 100.0, 101.0, 101.5],
            "High": [103.0, 101.0, "", 102.5],
            "Low": [101.0, 99.0, 100.0, 100.5],
            "Close": [102.5, 100.5, 101.5, 102.0],
            "Volume": [1200.0, 1000.0, 1100.0, None],
        }
    )
    frame.to_csv(path, index=False)


def test_csv_source_orders_and_deduplicates_bars(tmp_path: Path) -> None:
    _write_csv(tmp_path / "BBCA.csv")
    source = CsvBarSource(str(tmp_path))

    series = source.get_series("bbca")

    assert series.symbol == "BBCA"
    assert [bar.date for bar in series.bars] == [
        date(2025, 1, 1),
        date(2025, 1, 2),
        date(2025, 1, 3),
    ]
    assert series.bars[1].close == 102.0
    assert series.bars[1].volume is None
    assert series.close_prices().tolist() == [100.5, 102.0, 102.5]


def test_csv_source_keeps_missing_fields_absent(tmp_path: Path) -> None:
    frame = pd.DataFrame({"timestamp": ["2025-01-01", "2025-01-02"], "close": [1.0, "bad"]})
    frame.to_csv(tmp_path / "TLKM.csv", index=False)

    series = CsvBarSource(str(tmp_path)).get_series("TLKM")

    assert series.bars[0].open is None
    assert series.bars[0].volume is None
    assert series.bars[1].close is None


def test_csv_source_lists_symbols(tmp_path: Path) -> None:
    _write_csv(tmp_path / "bbca.csv")
    _write_csv(tmp_path / "ASII.csv")
    (tmp_path / "readme.txt").write_text("x", encoding="utf-8")

    assert CsvBarSource(str(tmp_path)).list_symbols() == ["ASII", "BBCA"]


def test_csv_source_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DataProviderError, match="No CSV found"):
        CsvBarSource(str(tmp_path)).get_series("GOTO")


def test_csv_source_requires_date_and_close(tmp_path: Path) -> None:
    pd.DataFrame({"close": [1.0]}).to_csv(tmp_path / "NODATE.csv", index=False)
    pd.DataFrame({"date": ["2025-01-01"], "open": [1.0]}).to_csv(
        tmp_path / "NOCLOSE.csv", index=False
    )

    with pytest.raises(DataProviderError, match="date column"):
        CsvBarSource(str(tmp_path)).get_series("NODATE")
    with pytest.raises(DataProviderError, match="close"):
        CsvBarSource(str(tmp_path)).get_series("NOCLOSE")
