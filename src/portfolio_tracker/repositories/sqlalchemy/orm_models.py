"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    UniqueConstraint,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from portfolio_tracker.core.timezone import now_ist
from portfolio_tracker.repositories.sqlalchemy.database import Base
from portfolio_tracker.domain.models.enums import AssetType, AssetSource, TransactionType


class AssetORM(Base):
    """SQLAlchemy model for Asset (current holding)."""

    __tablename__ = "assets"
    __table_args__ = (UniqueConstraint("symbol", "asset_type", name="uq_asset_symbol_type"),)

    asset_id = Column(String(36), primary_key=True)
    symbol = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    asset_type = Column(SqlEnum(AssetType), nullable=False)
    quantity = Column(Numeric(precision=18, scale=8), nullable=False, default=Decimal("0"))
    average_price = Column(Numeric(precision=18, scale=4), nullable=False, default=Decimal("0"))
    invested_value = Column(Numeric(precision=18, scale=4), nullable=False, default=Decimal("0"))
    current_price = Column(Numeric(precision=18, scale=4), nullable=True)
    source = Column(SqlEnum(AssetSource), nullable=False, default=AssetSource.MANUAL)
    last_updated_ist = Column(DateTime, nullable=False, default=now_ist)

    transactions = relationship("TransactionORM", back_populates="asset")


class TransactionORM(Base):
    """SQLAlchemy model for Transaction (ledger entry)."""

    __tablename__ = "transactions"

    txn_id = Column(String(36), primary_key=True)
    # Insertion order; breaks ties between same-day transactions
    seq = Column(Integer, nullable=False, default=0, index=True)
    asset_id = Column(String(36), ForeignKey("assets.asset_id"), nullable=False, index=True)
    txn_type = Column(SqlEnum(TransactionType), nullable=False)
    quantity = Column(Numeric(precision=18, scale=8), nullable=False)
    price = Column(Numeric(precision=18, scale=4), nullable=False)
    txn_time_ist = Column(DateTime, nullable=False)
    external_id = Column(String(64), nullable=True)
    created_at_ist = Column(DateTime, nullable=False, default=now_ist)

    asset = relationship("AssetORM", back_populates="transactions")


class PriceORM(Base):
    """SQLAlchemy model for PriceCacheEntry (last live price per symbol/type)."""

    __tablename__ = "prices"

    symbol = Column(String(64), primary_key=True)
    asset_type = Column(SqlEnum(AssetType), primary_key=True)
    price = Column(Numeric(precision=18, scale=4), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    last_fetched_ist = Column(DateTime, nullable=False, default=now_ist)
