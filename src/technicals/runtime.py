"""Batch wiring: import bars, calculate indicators, rewrite records."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol
from uuid import uuid4

from technicals.aggregator import INDICATORS_KEY, IndicatorParams, attach_indicators
from technicals.config import Settings
from technicals.data.base import BarSource, RecordStore
from technicals.data.csv_data import CsvBarSource
from technicals.data.json_store import JsonRecordStore
from technicals.data.yfinance_data import YahooBarSource
from technicals.domain.events import RunEvent
from technicals.domain.models import PriceSeries
from technicals.errors import DataProviderError, MalformedInputError
from technicals.logging.event_sink import JsonlEventSink
from technicals.logging.logger import HumanLogger

CALCULATED = "calculated"
IMPORTED = "imported"
SKIPPED = "skipped"
FAILED = "failed"


class EventSink(Protocol):
    def emit(self, event: RunEvent) -> None: ...


@dataclass(frozen=True)
class RecordOutcome:
    """Result of processing one record or symbol."""

    key: str
    status: str
    message: str = ""
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class BatchSummary:
    """Counts for one batch pass."""

    total: int
    processed: int
    skipped: int
    failed: int

    @classmethod
    def from_outcomes(cls, outcomes: list[RecordOutcome]) -> BatchSummary:
        return cls(
            total=len(outcomes),
            processed=sum(1 for outcome in outcomes if outcome.status in {CALCULATED, IMPORTED}),
            skipped=sum(1 for outcome in outcomes if outcome.status == SKIPPED),
            failed=sum(1 for outcome in outcomes if outcome.status == FAILED),
        )


def run(settings: Settings) -> int:
    """Run imports requested by settings, then calculate every record."""
    store = build_record_store(settings)
    human_logger = HumanLogger(level=settings.log_level)
    run_id = uuid4().hex
    run_directory = Path(settings.events_dir) / run_id
    event_sink = JsonlEventSink(str(run_directory / "events.jsonl"))

    try:
        if settings.csv_dir:
            csv_source = CsvBarSource(settings.csv_dir)
            import_bars(
                store=store,
                source=csv_source,
                symbols=settings.symbols or csv_source.list_symbols(),
                source_name="csv",
                settings=settings,
                run_id=run_id,
                event_sink=event_sink,
                human_logger=human_logger,
            )
        if settings.fetch:
            import_bars(
                store=store,
                source=YahooBarSource(period=settings.yahoo_range, suffix=settings.yahoo_suffix),
                symbols=settings.symbols,
                source_name="yahoo-finance",
                settings=settings,
                run_id=run_id,
                event_sink=event_sink,
                human_logger=human_logger,
            )
        if not store.exists():
            human_logger.error(f"Record directory not found: {settings.data_dir}")
            return 1
        calculate_all(
            store=store,
            settings=settings,
            run_id=run_id,
            event_sink=event_sink,
            human_logger=human_logger,
        )
    except Exception as exc:
        human_logger.error(str(exc))
        event_sink.emit(RunEvent(run_id=run_id, event_type="error", payload={"message": str(exc)}))
        return 1
    return 0


def build_record_store(settings: Settings) -> JsonRecordStore:
    return JsonRecordStore(settings.data_dir, excluded_files=settings.excluded_files)


def select_keys(keys: Iterable[str], symbols: list[str]) -> list[str]:
    """Keep record keys matching requested symbols, or all when none requested."""
    if not symbols:
        return list(keys)
    wanted = {symbol.upper() for symbol in symbols}
    return [key for key in keys if key.upper() in wanted]


def calculate_record(
    store: RecordStore,
    key: str,
    params: IndicatorParams,
    now: datetime | None = None,
) -> RecordOutcome:
    """Load, compute, and rewrite one record, isolating its failures."""
    try:
        record = store.load(key)
        updated = attach_indicators(record, params, now=now)
        if updated is None:
            return RecordOutcome(key=key, status=SKIPPED, message="insufficient data")
        store.save(key, updated)
    except (MalformedInputError, OSError) as exc:
        return RecordOutcome(key=key, status=FAILED, message=str(exc))
    return RecordOutcome(key=key, status=CALCULATED, details=updated[INDICATORS_KEY])


def calculate_all(
    store: RecordStore,
    settings: Settings,
    run_id: str,
    event_sink: EventSink,
    human_logger: HumanLogger,
    now: datetime | None = None,
) -> BatchSummary:
    """Calculate indicators for every selected record."""
    keys = select_keys(store.list_keys(), settings.symbols)
    human_logger.run_started(run_id, "calculate", len(keys))
    calculated_at = now or datetime.now(tz=UTC)

    def work(key: str) -> RecordOutcome:
        return calculate_record(store, key, settings.indicators, now=calculated_at)

    outcomes: list[RecordOutcome] = []
    for outcome in _map_ordered(work, keys, settings.workers):
        outcomes.append(outcome)
        if outcome.status == CALCULATED:
            human_logger.calculated(outcome.key, outcome.details)
        elif outcome.status == FAILED:
            human_logger.failed(outcome.key, outcome.message)
        event_sink.emit(
            RunEvent(
                run_id=run_id,
                event_type=outcome.status,
                symbol=outcome.key,
                payload={"message": outcome.message} if outcome.message else {},
            )
        )

    summary = BatchSummary.from_outcomes(outcomes)
    human_logger.run_completed("Processed", summary.processed, summary.total)
    event_sink.emit(
        RunEvent(run_id=run_id, event_type="calculate_completed", payload=asdict(summary))
    )
    return summary


def build_record(existing: dict[str, Any], series: PriceSeries, source: str) -> dict[str, Any]:
    """Merge fresh bars into a stored record, keeping unrelated keys."""
    record = dict(existing)
    record["symbol"] = series.symbol
    record["historicalData"] = series.to_record_bars()
    record["lastUpdate"] = datetime.now(tz=UTC).isoformat()
    record["source"] = source
    return record


def import_symbol(
    store: JsonRecordStore,
    source: BarSource,
    symbol: str,
    source_name: str,
) -> RecordOutcome:
    """Fetch one symbol's bars and write them into its record."""
    try:
        series = source.get_series(symbol)
        existing = store.load(series.symbol) if store.has(series.symbol) else {}
        store.save(series.symbol, build_record(existing, series, source_name))
    except (DataProviderError, MalformedInputError, OSError) as exc:
        return RecordOutcome(key=symbol, status=FAILED, message=str(exc))
    return RecordOutcome(key=series.symbol, status=IMPORTED, details={"bars": len(series)})


def import_bars(
    store: JsonRecordStore,
    source: BarSource,
    symbols: list[str],
    source_name: str,
    settings: Settings,
    run_id: str,
    event_sink: EventSink,
    human_logger: HumanLogger,
) -> BatchSummary:
    """Write records for each symbol from a bar source."""
    human_logger.run_started(run_id, f"import {source_name}", len(symbols))

    def work(symbol: str) -> RecordOutcome:
        return import_symbol(store, source, symbol, source_name)

    outcomes: list[RecordOutcome] = []
    for outcome in _map_ordered(work, symbols, settings.workers):
        outcomes.append(outcome)
        if outcome.status == IMPORTED:
            bars = int((outcome.details or {}).get("bars", 0))
            human_logger.imported(outcome.key, bars, source_name)
        else:
            human_logger.failed(outcome.key, outcome.message)
        event_sink.emit(
            RunEvent(
                run_id=run_id,
                event_type=outcome.status,
                symbol=outcome.key,
                payload={"source": source_name, "message": outcome.message},
            )
        )

    summary = BatchSummary.from_outcomes(outcomes)
    store.write_metadata(
        {
            "lastUpdate": datetime.now(tz=UTC).isoformat(),
            "source": source_name,
            "totalStocks": summary.processed,
            "stocks": list(symbols),
            "successfullyFetched": [
                outcome.key for outcome in outcomes if outcome.status == IMPORTED
            ],
        }
    )
    human_logger.run_completed("Imported", summary.processed, summary.total)
    return summary


def _map_ordered(
    work: Callable[[str], RecordOutcome],
    items: list[str],
    workers: int,
) -> Iterator[RecordOutcome]:
    if workers <= 1 or len(items) <= 1:
        for item in items:
            yield work(item)
        return
    with ThreadPoolExecutor(max_workers=workers) as executor:
        yield from executor.map(work, items)
