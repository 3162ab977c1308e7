"""
Price resolution over ordered provider chains.

HistoricalPriceResolver serves one growth-analysis run: it fetches each
asset's series at most once (GOLD assets share a single series) and answers
per-day lookups from the memo. LivePriceResolver serves one portfolio
snapshot: fresh cache entry first, then the live chain, then the asset's own
average cost.

Provider errors never escape either resolver.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal
from typing import Optional

from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.domain.models import Asset, AssetType
from portfolio_tracker.providers.base import HistoryProvider, LiveQuoteProvider, PriceSeries
from portfolio_tracker.services.price_cache import PriceCacheService

logger = logging.getLogger(__name__)

# GOLD is one fungible position: every GOLD asset shares one rate series
GOLD_KEY = "*"
GOLD_CACHE_SYMBOL = "GOLD"

SeriesKey = tuple[str, AssetType]


def series_key(asset: Asset) -> SeriesKey:
    if asset.asset_type == AssetType.GOLD:
        return (GOLD_KEY, AssetType.GOLD)
    return (asset.symbol, asset.asset_type)


class HistoricalPriceResolver:
    def __init__(
        self,
        chains: dict[AssetType, list[HistoryProvider]],
        start: date,
        end: date,
        gold_floor: Decimal,
        workers: int = 1,
    ):
        self._chains = chains
        self._start = start
        self._end = end
        self._gold_floor = gold_floor
        self._workers = max(workers, 1)
        self._memo: dict[SeriesKey, PriceSeries] = {}
        self._memo_lock = threading.Lock()
        self._key_locks: dict[SeriesKey, threading.Lock] = {}
        self.fetch_count = 0

    @property
    def start(self) -> date:
        return self._start

    @property
    def end(self) -> date:
        return self._end

    def prefetch(self, assets: list[Asset]) -> None:
        """Fetch every asset's series up front, in parallel when workers > 1."""
        if self._workers == 1 or len(assets) <= 1:
            for asset in assets:
                self.series_for(asset)
            return
        with ThreadPoolExecutor(max_workers=self._workers) as pool:
            list(pool.map(self.series_for, assets))

    def series_for(self, asset: Asset) -> PriceSeries:
        """The asset's price series for the run; empty if every provider failed."""
        key = series_key(asset)
        with self._memo_lock:
            if key in self._memo:
                return self._memo[key]
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        # One fetch per key; a concurrent caller for the same key waits here
        with key_lock:
            with self._memo_lock:
                if key in self._memo:
                    return self._memo[key]
            series = self._fetch(asset)
            with self._memo_lock:
                self._memo[key] = series
        return series

    def price_on(self, asset: Asset, day: date) -> Optional[Decimal]:
        """Price published for exactly this day, if any."""
        return self.series_for(asset).get(day)

    def seed_price(self, asset: Asset) -> Optional[Decimal]:
        """
        Carry-forward seed for the window start.

        The last price on or before the window start, else the earliest price
        in the series. Seeding from the earliest price alone would pick a
        years-old NAV whenever the provider returns a fund's full history.
        """
        series = self.series_for(asset)
        if not series:
            return None
        on_or_before = [d for d in series if d <= self._start]
        if on_or_before:
            return series[max(on_or_before)]
        return series[min(series)]

    def floor_price(self, asset: Asset) -> Optional[Decimal]:
        """Last-resort price when nothing was ever resolved for the asset."""
        if asset.asset_type == AssetType.GOLD:
            floor = self._gold_floor
        else:
            floor = asset.cost_per_unit
        return floor if floor > 0 else None

    def _fetch(self, asset: Asset) -> PriceSeries:
        label = "GOLD" if asset.asset_type == AssetType.GOLD else asset.symbol
        for provider in self._chains.get(asset.asset_type, []):
            with self._memo_lock:
                self.fetch_count += 1
            try:
                series = provider.fetch_history(asset, self._start, self._end)
            except ProviderError as e:
                logger.warning("History for %s unavailable from %s: %s", label, provider.name, e.message)
                continue
            if series:
                logger.info("History for %s from %s: %d points", label, provider.name, len(series))
                return dict(series)
            logger.warning("History for %s from %s was empty", label, provider.name)

        logger.warning("No price history for %s; falling back to carry-forward/floor", label)
        return {}


class LivePriceResolver:
    def __init__(
        self,
        chains: dict[AssetType, list[LiveQuoteProvider]],
        cache: PriceCacheService,
    ):
        self._chains = chains
        self._cache = cache
        self._gold_rate: Optional[Decimal] = None
        self._gold_attempted = False

    def resolve(self, asset: Asset) -> Decimal:
        """Live price for the asset; falls back to its average cost."""
        if asset.asset_type == AssetType.GOLD:
            price = self._resolve_gold(asset)
        else:
            price = self._resolve_cached(asset, asset.symbol)

        if price is not None:
            return price
        logger.warning("No live price for %s; using average cost", asset.symbol)
        return asset.cost_per_unit

    def _resolve_gold(self, asset: Asset) -> Optional[Decimal]:
        # Resolved once per snapshot and shared by every GOLD asset
        if not self._gold_attempted:
            self._gold_attempted = True
            self._gold_rate = self._resolve_cached(asset, GOLD_CACHE_SYMBOL)
        return self._gold_rate

    def _resolve_cached(self, asset: Asset, cache_symbol: str) -> Optional[Decimal]:
        cached = self._cache.get_fresh(cache_symbol, asset.asset_type)
        if cached is not None:
            logger.debug("Live price for %s served from cache", cache_symbol)
            return cached

        for provider in self._chains.get(asset.asset_type, []):
            try:
                price = provider.fetch_live(asset)
            except ProviderError as e:
                logger.warning("Live price for %s unavailable from %s: %s", cache_symbol, provider.name, e.message)
                continue
            if price is None or price <= 0:
                continue
            self._cache.put(cache_symbol, asset.asset_type, price)
            return price
        return None
