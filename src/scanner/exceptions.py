"""Custom exceptions for the price scanner.

Missing history and symbols absent from a reference snapshot are NOT
exceptions: the timeframe resolver falls back to native 24h figures.
"""


class ScannerError(Exception):
    """Base exception for all scanner errors."""


class FetchError(ScannerError):
    """Raised by an adapter when a poll fails (network, HTTP status, bad JSON or payload).

    Pollers catch it, count it and skip the cycle. It never reaches queries.
    """

    def __init__(self, exchange: str, message: str) -> None:
        super().__init__(f"[{exchange}] {message}")
        self.exchange = exchange
        self.message = message


class UnknownExchangeError(ScannerError):
    """Raised when a query names an exchange id the engine does not run."""

    def __init__(self, exchange: str) -> None:
        super().__init__(f"Unknown exchange: {exchange}")
        self.exchange = exchange
