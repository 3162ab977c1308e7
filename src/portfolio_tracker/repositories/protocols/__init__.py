"""Repository protocol definitions (interfaces)."""

from portfolio_tracker.repositories.protocols.asset_repo import AssetRepository
from portfolio_tracker.repositories.protocols.transaction_repo import TransactionRepository
from portfolio_tracker.repositories.protocols.price_cache_repo import PriceCacheRepository

__all__ = [
    "AssetRepository",
    "TransactionRepository",
    "PriceCacheRepository",
]
