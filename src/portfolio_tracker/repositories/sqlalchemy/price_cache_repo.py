"""SQLAlchemy implementation of PriceCacheRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio_tracker.core.timezone import to_ist
from portfolio_tracker.domain.models import PriceCacheEntry, AssetType
from portfolio_tracker.repositories.sqlalchemy.orm_models import PriceORM


class SqlAlchemyPriceCacheRepository:
    """SQLAlchemy-backed store for the last live price per (symbol, type)."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, symbol: str, asset_type: AssetType) -> Optional[PriceCacheEntry]:
        """Get the cached entry for (symbol, type)."""
        orm_price = (
            self._db.query(PriceORM)
            .filter(
                PriceORM.symbol == symbol,
                PriceORM.asset_type == asset_type,
            )
            .first()
        )
        return self._to_domain(orm_price) if orm_price else None

    def put(self, entry: PriceCacheEntry) -> PriceCacheEntry:
        """Insert or overwrite the entry for (symbol, type)."""
        orm_price = (
            self._db.query(PriceORM)
            .filter(
                PriceORM.symbol == entry.symbol,
                PriceORM.asset_type == entry.asset_type,
            )
            .first()
        )

        if orm_price:
            orm_price.price = entry.price
            orm_price.currency = entry.currency
            orm_price.last_fetched_ist = entry.last_fetched_ist
        else:
            orm_price = PriceORM(
                symbol=entry.symbol,
                asset_type=entry.asset_type,
                price=entry.price,
                currency=entry.currency,
                last_fetched_ist=entry.last_fetched_ist,
            )
            self._db.add(orm_price)

        try:
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            raise
        self._db.refresh(orm_price)
        return self._to_domain(orm_price)

    @staticmethod
    def _to_domain(orm: PriceORM) -> PriceCacheEntry:
        """Convert ORM price to domain model."""
        return PriceCacheEntry(
            symbol=orm.symbol,
            asset_type=orm.asset_type,
            price=Decimal(str(orm.price)),
            currency=orm.currency,
            last_fetched_ist=to_ist(orm.last_fetched_ist) if orm.last_fetched_ist else None,
        )
