"""CSV-backed daily bar source."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from technicals.domain.models import OHLCV_FIELDS, PriceSeries
from technicals.errors import DataProviderError, MalformedInputError


class CsvBarSource:
    """Load daily OHLCV bars from `<SYMBOL>.csv` files."""

    date_column_candidates = ("date", "datetime", "timestamp")
    required_columns = ("close",)

    def __init__(self, data_dir: str) -> None:
        self.data_dir = Path(data_dir)

    def list_symbols(self) -> list[str]:
        if not self.data_dir.is_dir():
            return []
        return sorted(path.stem.upper() for path in self.data_dir.glob("*.csv") if path.is_file())

    def get_series(self, symbol: str) -> PriceSeries:
        path = self._resolve_path(symbol)
        if path is None:
            raise DataProviderError(f"No CSV found for {symbol} under {self.data_dir}")
        try:
            frame = pd.read_csv(path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
            raise DataProviderError(f"{symbol}: unreadable CSV {path.name} ({exc})") from exc
        normalized = self._normalize_csv(frame, symbol)
        try:
            return PriceSeries.from_frame(symbol.upper(), normalized)
        except MalformedInputError as exc:
            raise DataProviderError(str(exc)) from exc

    def _resolve_path(self, symbol: str) -> Path | None:
        bare_symbol = symbol.strip()
        candidates = [
            self.data_dir / f"{bare_symbol.upper()}.csv",
            self.data_dir / f"{bare_symbol.lower()}.csv",
            self.data_dir / f"{bare_symbol}.csv",
        ]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return None

    def _normalize_csv(self, frame: pd.DataFrame, symbol: str) -> pd.DataFrame:
        lower_to_original = {str(column).strip().lower(): column for column in frame.columns}
        date_column = self._pick_date_column(lower_to_original)
        for name in self.required_columns:
            if name not in lower_to_original:
                raise DataProviderError(f"{symbol}: CSV missing required column '{name}'")

        normalized = pd.DataFrame(
            index=pd.to_datetime(frame[date_column], utc=True, errors="coerce")
        )
        for name in OHLCV_FIELDS:
            source = lower_to_original.get(name)
            if source is None:
                normalized[name] = float("nan")
            else:
                normalized[name] = pd.to_numeric(frame[source], errors="coerce").to_numpy()
        normalized = normalized[normalized.index.notna()]
        normalized = normalized.sort_index(kind="mergesort")
        normalized = normalized[~normalized.index.normalize().duplicated(keep="last")]
        if normalized["close"].dropna().empty:
            raise DataProviderError(f"{symbol}: CSV has no valid close prices")
        return normalized

    def _pick_date_column(self, lower_to_original: dict[str, object]) -> object:
        for candidate in self.date_column_candidates:
            if candidate in lower_to_original:
                return lower_to_original[candidate]
        candidates = ", ".join(self.date_column_candidates)
        raise DataProviderError(f"CSV missing date column. Expected one of: {candidates}")
