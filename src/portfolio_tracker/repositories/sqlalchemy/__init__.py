"""SQLAlchemy repository implementations."""

from portfolio_tracker.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    reset_database,
    Base,
)
from portfolio_tracker.repositories.sqlalchemy.asset_repo import SqlAlchemyAssetRepository
from portfolio_tracker.repositories.sqlalchemy.transaction_repo import SqlAlchemyTransactionRepository
from portfolio_tracker.repositories.sqlalchemy.price_cache_repo import SqlAlchemyPriceCacheRepository

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyAssetRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyPriceCacheRepository",
]
