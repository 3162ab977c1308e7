"""Unit tests for PriceCacheService freshness rules."""

from datetime import timedelta
from decimal import Decimal

from sqlalchemy.exc import OperationalError

from portfolio_tracker.domain.models import AssetType
from portfolio_tracker.services import PriceCacheService

from tests.conftest import InMemoryPriceCacheRepository


class MovableClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


class BrokenCacheRepository(InMemoryPriceCacheRepository):
    def put(self, entry):
        raise OperationalError("INSERT INTO prices", {}, Exception("database is locked"))


class TestFreshness:
    def test_entry_within_window_is_served(self, memory_cache_repo, fixed_now):
        clock = MovableClock(fixed_now)
        cache = PriceCacheService(memory_cache_repo, freshness_minutes=15, clock=clock)
        cache.put("TCS", AssetType.STOCK, Decimal("3900"))

        clock.now = fixed_now + timedelta(minutes=14, seconds=59)

        assert cache.get_fresh("TCS", AssetType.STOCK) == Decimal("3900")

    def test_entry_at_window_edge_is_stale(self, memory_cache_repo, fixed_now):
        clock = MovableClock(fixed_now)
        cache = PriceCacheService(memory_cache_repo, freshness_minutes=15, clock=clock)
        cache.put("TCS", AssetType.STOCK, Decimal("3900"))

        clock.now = fixed_now + timedelta(minutes=15)

        assert cache.get_fresh("TCS", AssetType.STOCK) is None

    def test_entries_are_keyed_by_symbol_and_type(self, price_cache):
        price_cache.put("GOLD", AssetType.GOLD, Decimal("6500"))

        assert price_cache.get_fresh("GOLD", AssetType.STOCK) is None
        assert price_cache.get_fresh("GOLD", AssetType.GOLD) == Decimal("6500")

    def test_put_overwrites_previous_entry(self, price_cache, memory_cache_repo):
        price_cache.put("TCS", AssetType.STOCK, Decimal("3900"))
        price_cache.put("TCS", AssetType.STOCK, Decimal("3925"))

        assert len(memory_cache_repo.entries) == 1
        assert price_cache.get_fresh("TCS", AssetType.STOCK) == Decimal("3925")

    def test_missing_entry_is_none(self, price_cache):
        assert price_cache.get_fresh("TCS", AssetType.STOCK) is None


class TestDisabledCache:
    def test_zero_minutes_disables_reads_but_still_writes(self, memory_cache_repo, fixed_now):
        """
        GIVEN a freshness window of 0 minutes
        WHEN a price is written and read back immediately
        THEN the read misses but the entry is stored
        """
        cache = PriceCacheService(memory_cache_repo, freshness_minutes=0, clock=lambda: fixed_now)

        cache.put("TCS", AssetType.STOCK, Decimal("3900"))

        assert cache.enabled is False
        assert cache.get_fresh("TCS", AssetType.STOCK) is None
        assert memory_cache_repo.get("TCS", AssetType.STOCK).price == Decimal("3900")


class TestWriteFailures:
    def test_failed_write_is_logged_not_raised(self, fixed_now, caplog):
        cache = PriceCacheService(BrokenCacheRepository(), freshness_minutes=15, clock=lambda: fixed_now)

        cache.put("TCS", AssetType.STOCK, Decimal("3900"))

        assert "Could not cache price for TCS" in caplog.text
