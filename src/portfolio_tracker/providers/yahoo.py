"""
Yahoo Finance client (via yfinance).

Daily close history and live quotes for exchange-suffixed symbols
("RELIANCE.NS", "500325.BO") and the XAUINR=X spot rate. Every call runs
under call_with_timeout since yfinance takes no timeout of its own.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import pandas as pd

from portfolio_tracker.config.settings import get_settings
from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.providers.base import PriceSeries, call_with_timeout, to_price

logger = logging.getLogger(__name__)

PROVIDER = "yahoo"

# Troy ounce in grams
GRAMS_PER_TROY_OUNCE = Decimal("31.1034768")


def _get_yf():
    import yfinance as yf
    return yf


def _history_impl(symbol: str, start: date, end: date) -> PriceSeries:
    yf = _get_yf()
    hist = yf.Ticker(symbol).history(
        start=start,
        end=end + timedelta(days=1),
        auto_adjust=False,
    )
    series: PriceSeries = {}
    if hist is None or hist.empty or "Close" not in hist.columns:
        return series
    for idx, close in hist["Close"].items():
        if close is None or pd.isna(close):
            continue
        day = idx.date() if hasattr(idx, "date") else idx
        series[day] = to_price(float(close))
    return series


def _live_impl(symbol: str) -> Optional[float]:
    yf = _get_yf()
    info = yf.Ticker(symbol).info
    if not isinstance(info, dict):
        return None
    price = info.get("regularMarketPrice")
    if price is None:
        price = info.get("currentPrice")
    return price


def fetch_quote_history(symbol: str, start: date, end: date, timeout: Optional[float] = None) -> PriceSeries:
    """Daily closes for a Yahoo symbol over [start, end]; raises ProviderError if none."""
    timeout = timeout if timeout is not None else get_settings().http_timeout_seconds
    try:
        series = call_with_timeout(PROVIDER, _history_impl, timeout, symbol, start, end)
    except ProviderError:
        raise
    except Exception as e:
        raise ProviderError(PROVIDER, f"history for {symbol} failed: {e}") from e

    if not series:
        raise ProviderError(PROVIDER, f"no history for {symbol} between {start} and {end}")
    logger.debug("Yahoo history %s: %d points", symbol, len(series))
    return series


def fetch_live_quote(symbol: str, timeout: Optional[float] = None) -> Decimal:
    """Current market price for a Yahoo symbol; raises ProviderError if unavailable."""
    timeout = timeout if timeout is not None else get_settings().http_timeout_seconds
    try:
        raw = call_with_timeout(PROVIDER, _live_impl, timeout, symbol)
    except ProviderError:
        raise
    except Exception as e:
        raise ProviderError(PROVIDER, f"quote for {symbol} failed: {e}") from e

    try:
        price = to_price(raw)
    except ValueError as e:
        raise ProviderError(PROVIDER, f"no market price for {symbol}") from e
    if price <= 0:
        raise ProviderError(PROVIDER, f"non-positive market price for {symbol}: {price}")
    return price


def fetch_gold_per_gram(symbol: Optional[str] = None, timeout: Optional[float] = None) -> Decimal:
    """Spot gold in INR per gram, derived from the per-ounce XAUINR quote."""
    symbol = symbol or get_settings().yahoo_gold_symbol
    per_ounce = fetch_live_quote(symbol, timeout=timeout)
    return per_ounce / GRAMS_PER_TROY_OUNCE
