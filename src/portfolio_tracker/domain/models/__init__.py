"""Domain models package."""

from portfolio_tracker.domain.models.enums import AssetType, AssetSource, TransactionType
from portfolio_tracker.domain.models.asset import Asset
from portfolio_tracker.domain.models.transaction import Transaction
from portfolio_tracker.domain.models.price import PriceCacheEntry

__all__ = [
    "AssetType",
    "AssetSource",
    "TransactionType",
    "Asset",
    "Transaction",
    "PriceCacheEntry",
]
