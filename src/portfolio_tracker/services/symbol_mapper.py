"""
Symbol mapper: equity symbol -> brokerage token, fund ISIN -> AMFI scheme code.

Both master lists are large downloads held in memory by a RefreshingMaster.
A master is loaded on first use and reloaded once its refresh interval has
passed. Loads are single-flight: a caller arriving during a load blocks on
the lock and reuses the result. A failed load keeps the previous (stale)
data, if any, and is not retried until the retry interval has passed.
"""

import logging
import threading
import time
from typing import Callable, Generic, Optional, TypeVar

from portfolio_tracker.config.settings import Settings, get_settings
from portfolio_tracker.core.exceptions import ProviderError
from portfolio_tracker.providers.masters import (
    ExchangeToken,
    ScripIndex,
    download_amfi_map,
    download_scrip_master,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RefreshingMaster(Generic[T]):
    def __init__(
        self,
        name: str,
        loader: Callable[[], T],
        refresh_seconds: float,
        retry_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self._loader = loader
        self._refresh_seconds = refresh_seconds
        self._retry_seconds = retry_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self._loaded_at: Optional[float] = None
        self._last_failed_at: Optional[float] = None
        self.load_count = 0

    @property
    def last_failed_at(self) -> Optional[float]:
        return self._last_failed_at

    def get(self) -> Optional[T]:
        """Return the master data, loading or refreshing it if due."""
        if self._is_fresh(self._clock()):
            return self._value

        with self._lock:
            now = self._clock()
            if self._is_fresh(now):
                return self._value
            if self._last_failed_at is not None and now - self._last_failed_at < self._retry_seconds:
                return self._value

            self.load_count += 1
            try:
                value = self._loader()
            except ProviderError as e:
                self._last_failed_at = now
                if self._value is None:
                    logger.warning("Loading %s failed: %s", self.name, e.message)
                else:
                    logger.warning("Refreshing %s failed, keeping stale copy: %s", self.name, e.message)
                return self._value

            self._value = value
            self._loaded_at = now
            self._last_failed_at = None
            return self._value

    def _is_fresh(self, now: float) -> bool:
        return (
            self._value is not None
            and self._loaded_at is not None
            and now - self._loaded_at < self._refresh_seconds
        )


class SymbolMapper:
    """Process-wide symbol resolution backed by two refreshing masters."""

    def __init__(
        self,
        scrip_master: RefreshingMaster[ScripIndex],
        amfi_master: RefreshingMaster[dict[str, str]],
    ):
        self._scrip_master = scrip_master
        self._amfi_master = amfi_master

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SymbolMapper":
        settings = settings or get_settings()
        refresh = settings.master_refresh_hours * 3600
        retry = settings.master_retry_seconds
        return cls(
            scrip_master=RefreshingMaster(
                "scrip master",
                lambda: download_scrip_master(url=settings.scrip_master_url),
                refresh,
                retry,
            ),
            amfi_master=RefreshingMaster(
                "AMFI master",
                lambda: download_amfi_map(url=settings.amfi_nav_all_url),
                refresh,
                retry,
            ),
        )

    def resolve_exchange_token(self, symbol: str) -> Optional[ExchangeToken]:
        """Brokerage token for an equity symbol, or None if unknown/unavailable."""
        index = self._scrip_master.get()
        if index is None:
            return None
        return index.lookup(symbol)

    def resolve_scheme_code(self, isin: str) -> Optional[str]:
        """AMFI scheme code for a fund ISIN, or None if unknown/unavailable."""
        if not isin:
            return None
        mapping = self._amfi_master.get()
        if mapping is None:
            return None
        return mapping.get(isin.strip().upper())
