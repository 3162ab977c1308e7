"""Price providers: external clients and the strategy contracts they implement."""

from portfolio_tracker.providers.base import (
    HistoryProvider,
    LiveQuoteProvider,
    PriceSeries,
    call_with_timeout,
)

__all__ = [
    "HistoryProvider",
    "LiveQuoteProvider",
    "PriceSeries",
    "call_with_timeout",
]
