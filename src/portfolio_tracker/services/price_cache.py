"""Freshness-window cache over persisted live prices."""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from portfolio_tracker.core.timezone import now_ist
from portfolio_tracker.domain.models import AssetType, PriceCacheEntry
from portfolio_tracker.repositories.protocols import PriceCacheRepository

logger = logging.getLogger(__name__)


class PriceCacheService:
    """
    Last live price per (symbol, asset type).

    An entry younger than freshness_minutes is served instead of calling
    providers. A freshness of 0 disables reads; writes still happen so the
    table always holds the latest resolved price.
    """

    def __init__(
        self,
        repo: PriceCacheRepository,
        freshness_minutes: int,
        currency: str = "INR",
        clock: Callable[[], datetime] = now_ist,
    ):
        self._repo = repo
        self._freshness = timedelta(minutes=max(freshness_minutes, 0))
        self._currency = currency
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self._freshness > timedelta(0)

    def get_fresh(self, symbol: str, asset_type: AssetType) -> Optional[Decimal]:
        """Cached price if present and within the freshness window."""
        if not self.enabled:
            return None
        entry = self._repo.get(symbol, asset_type)
        if entry is None or entry.last_fetched_ist is None:
            return None
        if self._clock() - entry.last_fetched_ist >= self._freshness:
            return None
        return entry.price

    def put(self, symbol: str, asset_type: AssetType, price: Decimal) -> None:
        """Record a freshly resolved price; a failed write is logged, not raised."""
        entry = PriceCacheEntry(
            symbol=symbol,
            asset_type=asset_type,
            price=price,
            currency=self._currency,
            last_fetched_ist=self._clock(),
        )
        try:
            self._repo.put(entry)
        except SQLAlchemyError as e:
            logger.warning("Could not cache price for %s/%s: %s", symbol, asset_type.value, e)
