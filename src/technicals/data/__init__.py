"""Record storage and bar sources."""

from .base import BarSource, RecordStore
from .csv_data import CsvBarSource
from .json_store import JsonRecordStore
from .yfinance_data import YahooBarSource

__all__ = [
    "BarSource",
    "CsvBarSource",
    "JsonRecordStore",
    "RecordStore",
    "YahooBarSource",
]
