"""Price cache repository protocol."""

from typing import Protocol, Optional

from portfolio_tracker.domain.models import PriceCacheEntry, AssetType


class PriceCacheRepository(Protocol):
    """Interface for the last-resolved live price per (symbol, type)."""

    def get(self, symbol: str, asset_type: AssetType) -> Optional[PriceCacheEntry]:
        """Get the cached entry, if any."""
        ...

    def put(self, entry: PriceCacheEntry) -> PriceCacheEntry:
        """Insert or overwrite the entry for (symbol, type)."""
        ...
