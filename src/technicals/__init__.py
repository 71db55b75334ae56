"""Technical indicator engine for daily OHLCV instrument records."""

__version__ = "0.1.0"
