"""Dependency injection for FastAPI."""

import threading
from decimal import Decimal
from datetime import date
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from portfolio_tracker.config.settings import get_settings
from portfolio_tracker.providers.smartapi import SmartApiSession
from portfolio_tracker.providers.strategies import (
    HistoryChains,
    LiveChains,
    build_history_chains,
    build_live_chains,
)
from portfolio_tracker.repositories.sqlalchemy.database import get_db
from portfolio_tracker.repositories.sqlalchemy import (
    SqlAlchemyAssetRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyPriceCacheRepository,
)
from portfolio_tracker.services import (
    GrowthService,
    HistoricalPriceResolver,
    LedgerService,
    LivePriceResolver,
    PortfolioAggregator,
    PriceCacheService,
    SymbolMapper,
)

# Process-wide services; created once, on first use
_lock = threading.Lock()
_symbol_mapper: Optional[SymbolMapper] = None
_smartapi_session: Optional[SmartApiSession] = None
_history_chains: Optional[HistoryChains] = None
_live_chains: Optional[LiveChains] = None


def get_symbol_mapper() -> SymbolMapper:
    """Provide the process-wide SymbolMapper."""
    global _symbol_mapper
    if _symbol_mapper is None:
        with _lock:
            if _symbol_mapper is None:
                _symbol_mapper = SymbolMapper.from_settings()
    return _symbol_mapper


def get_smartapi_session() -> SmartApiSession:
    """Provide the process-wide SmartAPI session."""
    global _smartapi_session
    if _smartapi_session is None:
        with _lock:
            if _smartapi_session is None:
                _smartapi_session = SmartApiSession()
    return _smartapi_session


def reset_singletons() -> None:
    """Drop process-wide services (after settings change)."""
    global _symbol_mapper, _smartapi_session, _history_chains, _live_chains
    with _lock:
        _symbol_mapper = None
        _smartapi_session = None
        _history_chains = None
        _live_chains = None


def get_asset_repo(db: Session = Depends(get_db)) -> SqlAlchemyAssetRepository:
    """Provide AssetRepository instance."""
    return SqlAlchemyAssetRepository(db)


def get_transaction_repo(db: Session = Depends(get_db)) -> SqlAlchemyTransactionRepository:
    """Provide TransactionRepository instance."""
    return SqlAlchemyTransactionRepository(db)


def get_price_cache_repo(db: Session = Depends(get_db)) -> SqlAlchemyPriceCacheRepository:
    """Provide PriceCacheRepository instance."""
    return SqlAlchemyPriceCacheRepository(db)


def get_ledger_service(
    asset_repo: SqlAlchemyAssetRepository = Depends(get_asset_repo),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
) -> LedgerService:
    """Provide LedgerService instance."""
    return LedgerService(
        asset_repo=asset_repo,
        transaction_repo=transaction_repo,
    )


def get_history_chains(
    mapper: SymbolMapper = Depends(get_symbol_mapper),
    session: SmartApiSession = Depends(get_smartapi_session),
) -> HistoryChains:
    """Provide the process-wide historical provider chains."""
    global _history_chains
    if _history_chains is None:
        with _lock:
            if _history_chains is None:
                _history_chains = build_history_chains(mapper, session)
    return _history_chains


def get_live_chains(mapper: SymbolMapper = Depends(get_symbol_mapper)) -> LiveChains:
    """Provide the process-wide live provider chains."""
    global _live_chains
    if _live_chains is None:
        with _lock:
            if _live_chains is None:
                _live_chains = build_live_chains(mapper)
    return _live_chains


def get_growth_service(
    asset_repo: SqlAlchemyAssetRepository = Depends(get_asset_repo),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
    chains: HistoryChains = Depends(get_history_chains),
) -> GrowthService:
    """Provide GrowthService instance."""
    settings = get_settings()

    def resolver_factory(start: date, end: date) -> HistoricalPriceResolver:
        return HistoricalPriceResolver(
            chains,
            start,
            end,
            gold_floor=Decimal(str(settings.gold_fallback_rate)),
            workers=settings.history_fetch_workers,
        )

    return GrowthService(
        asset_repo=asset_repo,
        transaction_repo=transaction_repo,
        resolver_factory=resolver_factory,
        lookback_days=settings.lookback_days,
    )


def get_price_cache_service(
    repo: SqlAlchemyPriceCacheRepository = Depends(get_price_cache_repo),
) -> PriceCacheService:
    """Provide PriceCacheService instance."""
    settings = get_settings()
    return PriceCacheService(
        repo,
        freshness_minutes=settings.live_price_cache_minutes,
        currency=settings.currency,
    )


def get_portfolio_aggregator(
    asset_repo: SqlAlchemyAssetRepository = Depends(get_asset_repo),
    cache: PriceCacheService = Depends(get_price_cache_service),
    chains: LiveChains = Depends(get_live_chains),
) -> PortfolioAggregator:
    """Provide PortfolioAggregator instance (one live resolver per request)."""
    return PortfolioAggregator(
        asset_repo=asset_repo,
        resolver=LivePriceResolver(chains, cache),
    )
