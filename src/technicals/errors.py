"""Custom exceptions for clearer error handling across the package."""


class TechnicalsError(Exception):
    """Base exception for all package-specific errors."""


class ConfigError(TechnicalsError, ValueError):
    """Raised when settings or indicator parameters are invalid."""


class InsufficientDataError(TechnicalsError):
    """Raised when a series has fewer bars than a computation requires."""

    def __init__(self, symbol: str, required: int, available: int) -> None:
        super().__init__(f"{symbol}: need at least {required} bars, got {available}")
        self.symbol = symbol
        self.required = required
        self.available = available


class MalformedInputError(TechnicalsError):
    """Raised when an instrument record cannot be parsed into a price series."""


class DataProviderError(TechnicalsError):
    """Raised when importing bars from CSV files or Yahoo Finance fails."""
