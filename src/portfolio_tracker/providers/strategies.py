"""
Price provider strategies and the per-class fallback chains.

Each strategy adapts one provider client to the HistoryProvider or
LiveQuoteProvider contract. A chain is an ordered list of strategies; the
price resolver walks it until one step returns a price.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from portfolio_tracker.config.settings import Settings, get_settings
from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.domain.models import Asset, AssetType
from portfolio_tracker.providers import yahoo
from portfolio_tracker.providers.base import HistoryProvider, LiveQuoteProvider, PriceSeries
from portfolio_tracker.providers.mfapi import MfApiClient
from portfolio_tracker.providers.safegold import SafeGoldClient
from portfolio_tracker.providers.smartapi import SmartApiClient, SmartApiSession
from portfolio_tracker.services.symbol_mapper import SymbolMapper

HistoryChains = dict[AssetType, list[HistoryProvider]]
LiveChains = dict[AssetType, list[LiveQuoteProvider]]


# =============================================================================
# History
# =============================================================================


class SmartApiCandleHistory:
    name = "smartapi-candles"

    def __init__(self, mapper: SymbolMapper, client: SmartApiClient):
        self._mapper = mapper
        self._client = client

    def fetch_history(self, asset: Asset, start: date, end: date) -> PriceSeries:
        token = self._mapper.resolve_exchange_token(asset.symbol)
        if token is None:
            raise ProviderError(self.name, f"no exchange token for {asset.symbol}")
        return self._client.fetch_candles(token, start, end)


class YahooHistory:
    def __init__(self, suffix: str):
        self._suffix = suffix
        self.name = f"yahoo-history{suffix}"

    def fetch_history(self, asset: Asset, start: date, end: date) -> PriceSeries:
        return yahoo.fetch_quote_history(f"{asset.symbol}{self._suffix}", start, end)


class AmfiNavHistory:
    """Full NAV history; the symbol of an MF asset is its ISIN."""

    name = "mfapi-nav-history"

    def __init__(self, mapper: SymbolMapper, client: MfApiClient):
        self._mapper = mapper
        self._client = client

    def fetch_history(self, asset: Asset, start: date, end: date) -> PriceSeries:
        code = self._mapper.resolve_scheme_code(asset.symbol)
        if code is None:
            raise ProviderError(self.name, f"no scheme code for ISIN {asset.symbol}")
        return self._client.fetch_nav_history(code)


class SafeGoldHistory:
    name = "safegold-history"

    def __init__(self, client: SafeGoldClient):
        self._client = client

    def fetch_history(self, asset: Asset, start: date, end: date) -> PriceSeries:
        return self._client.fetch_gold_history(start, end)


# =============================================================================
# Live
# =============================================================================


class YahooLiveQuote:
    def __init__(self, suffix: str):
        self._suffix = suffix
        self.name = f"yahoo-quote{suffix}"

    def fetch_live(self, asset: Asset) -> Decimal:
        return yahoo.fetch_live_quote(f"{asset.symbol}{self._suffix}")


class AmfiLiveNav:
    name = "mfapi-latest-nav"

    def __init__(self, mapper: SymbolMapper, client: MfApiClient):
        self._mapper = mapper
        self._client = client

    def fetch_live(self, asset: Asset) -> Decimal:
        code = self._mapper.resolve_scheme_code(asset.symbol)
        if code is None:
            raise ProviderError(self.name, f"no scheme code for ISIN {asset.symbol}")
        return self._client.fetch_latest_nav(code)


class BrokerNavLive:
    """NAV last reported by the broker alongside the holding."""

    name = "broker-nav"

    def fetch_live(self, asset: Asset) -> Decimal:
        if asset.current_price is None or asset.current_price <= 0:
            raise ProviderError(self.name, f"no broker NAV for {asset.symbol}")
        return asset.current_price


class SafeGoldLiveRate:
    name = "safegold-live"

    def __init__(self, client: SafeGoldClient):
        self._client = client

    def fetch_live(self, asset: Asset) -> Decimal:
        return self._client.fetch_live_rate()


class YahooGoldLiveRate:
    name = "yahoo-gold-spot"

    def __init__(self, symbol: str):
        self._symbol = symbol

    def fetch_live(self, asset: Asset) -> Decimal:
        return yahoo.fetch_gold_per_gram(self._symbol)


# =============================================================================
# Chain builders
# =============================================================================


def build_history_chains(
    mapper: SymbolMapper,
    session: SmartApiSession,
    settings: Optional[Settings] = None,
) -> HistoryChains:
    settings = settings or get_settings()
    return {
        AssetType.STOCK: [
            SmartApiCandleHistory(mapper, SmartApiClient(session)),
            YahooHistory(settings.home_exchange_suffix),
            YahooHistory(settings.alternate_exchange_suffix),
        ],
        AssetType.MF: [AmfiNavHistory(mapper, MfApiClient())],
        AssetType.GOLD: [SafeGoldHistory(SafeGoldClient())],
    }


def build_live_chains(mapper: SymbolMapper, settings: Optional[Settings] = None) -> LiveChains:
    settings = settings or get_settings()
    return {
        AssetType.STOCK: [
            YahooLiveQuote(settings.home_exchange_suffix),
            YahooLiveQuote(settings.alternate_exchange_suffix),
        ],
        AssetType.MF: [AmfiLiveNav(mapper, MfApiClient()), BrokerNavLive()],
        AssetType.GOLD: [
            SafeGoldLiveRate(SafeGoldClient()),
            YahooGoldLiveRate(settings.yahoo_gold_symbol),
        ],
    }
