"""Service layer - business logic orchestration."""

from portfolio_tracker.services.ledger_service import (
    LedgerService,
    AssetCreate,
    TransactionCreate,
    GoldHoldingInput,
)
from portfolio_tracker.services.price_cache import PriceCacheService
from portfolio_tracker.services.price_resolver import HistoricalPriceResolver, LivePriceResolver
from portfolio_tracker.services.balance_reconstructor import BalanceReconstructor
from portfolio_tracker.services.daily_simulator import DailySimulator
from portfolio_tracker.services.growth_service import GrowthService, trim_leading_zeros
from portfolio_tracker.services.portfolio_aggregator import PortfolioAggregator
from portfolio_tracker.services.symbol_mapper import SymbolMapper, RefreshingMaster

__all__ = [
    "LedgerService",
    "AssetCreate",
    "TransactionCreate",
    "GoldHoldingInput",
    "PriceCacheService",
    "HistoricalPriceResolver",
    "LivePriceResolver",
    "BalanceReconstructor",
    "DailySimulator",
    "GrowthService",
    "trim_leading_zeros",
    "PortfolioAggregator",
    "SymbolMapper",
    "RefreshingMaster",
]
