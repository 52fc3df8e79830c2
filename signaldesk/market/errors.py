"""Market-data error taxonomy.

Both errors are raised before data reaches the analysis core; the core
itself assumes validated input.
"""

from typing import Optional


class MarketDataError(Exception):
    """Base class for market-data failures."""


class UpstreamUnavailable(MarketDataError):
    """The exchange returned a non-2xx response or stayed rate-limited."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedInput(MarketDataError):
    """The exchange returned a series that violates the candle invariants."""
