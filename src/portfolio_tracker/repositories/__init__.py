"""Repository layer - data access abstractions and implementations."""

from portfolio_tracker.repositories.protocols import (
    AssetRepository,
    TransactionRepository,
    PriceCacheRepository,
)

__all__ = [
    "AssetRepository",
    "TransactionRepository",
    "PriceCacheRepository",
]
