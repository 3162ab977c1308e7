"""Domain layer - pure business models with no external dependencies."""

from portfolio_tracker.domain.models import (
    Asset,
    Transaction,
    PriceCacheEntry,
    AssetType,
    AssetSource,
    TransactionType,
)

__all__ = [
    "Asset",
    "Transaction",
    "PriceCacheEntry",
    "AssetType",
    "AssetSource",
    "TransactionType",
]
