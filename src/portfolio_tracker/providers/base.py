"""Price provider strategy contracts and call helpers."""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Protocol, TypeVar

from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.domain.models import Asset

logger = logging.getLogger(__name__)

T = TypeVar("T")

PriceSeries = dict[date, Decimal]


class HistoryProvider(Protocol):
    """
    One step of a historical price chain.

    fetch_history returns a non-empty mapping of calendar date -> price for the
    asset over [start, end], or raises ProviderError. Returning an empty
    series is never allowed: "no data" is an error so the chain moves on.
    """

    name: str

    def fetch_history(self, asset: Asset, start: date, end: date) -> PriceSeries:
        ...


class LiveQuoteProvider(Protocol):
    """
    One step of a live price chain.

    fetch_live returns a positive price for the asset, or raises ProviderError.
    """

    name: str

    def fetch_live(self, asset: Asset) -> Decimal:
        ...


def to_price(value: Any) -> Decimal:
    """Convert a provider number/string to Decimal; raises ValueError if unusable."""
    if value is None:
        raise ValueError("missing price")
    try:
        price = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation as e:
        raise ValueError(f"not a number: {value!r}") from e
    if not price.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return price


def call_with_timeout(provider: str, func: Callable[..., T], timeout: float, *args, **kwargs) -> T:
    """
    Run a blocking library call with a bounded wait.

    Used for libraries (yfinance) that do not take a timeout themselves. On
    timeout the worker thread is abandoned, not joined.
    """
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(func, *args, **kwargs)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        raise ProviderError(provider, f"timed out after {timeout}s") from e
    finally:
        executor.shutdown(wait=False)
