"""SQLAlchemy implementation of TransactionRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from portfolio_tracker.core.timezone import to_ist
from portfolio_tracker.domain.models import Transaction
from portfolio_tracker.repositories.sqlalchemy.orm_models import TransactionORM


class SqlAlchemyTransactionRepository:
    """SQLAlchemy-backed transaction repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        orm_txn = self._to_orm(transaction)
        last_seq = self._db.query(func.max(TransactionORM.seq)).scalar()
        orm_txn.seq = (last_seq or 0) + 1
        self._db.add(orm_txn)
        self._db.commit()
        self._db.refresh(orm_txn)
        return self._to_domain(orm_txn)

    def get_by_id(self, txn_id: str) -> Optional[Transaction]:
        """Retrieve transaction by ID."""
        orm_txn = self._db.query(TransactionORM).filter(
            TransactionORM.txn_id == txn_id
        ).first()
        return self._to_domain(orm_txn) if orm_txn else None

    def list_all(self) -> list[Transaction]:
        """List all transactions, ordered by txn_time_ist then insertion order."""
        query = self._db.query(TransactionORM).order_by(
            TransactionORM.txn_time_ist,
            TransactionORM.seq,
        )
        return [self._to_domain(t) for t in query.all()]

    def list_by_asset(self, asset_id: str) -> list[Transaction]:
        """List one asset's transactions, ordered by txn_time_ist then insertion order."""
        query = (
            self._db.query(TransactionORM)
            .filter(TransactionORM.asset_id == asset_id)
            .order_by(TransactionORM.txn_time_ist, TransactionORM.seq)
        )
        return [self._to_domain(t) for t in query.all()]

    def delete_by_asset(self, asset_id: str) -> None:
        """Delete every transaction of an asset."""
        self._db.query(TransactionORM).filter(
            TransactionORM.asset_id == asset_id
        ).delete()
        self._db.commit()

    def _to_orm(self, txn: Transaction) -> TransactionORM:
        """Convert domain model to ORM model."""
        return TransactionORM(
            txn_id=txn.txn_id,
            asset_id=txn.asset_id,
            txn_type=txn.txn_type,
            quantity=txn.quantity,
            price=txn.price,
            txn_time_ist=txn.txn_time_ist,
            external_id=txn.external_id,
            created_at_ist=txn.created_at_ist,
        )

    @staticmethod
    def _to_domain(orm: TransactionORM) -> Transaction:
        """Convert ORM model to domain model."""
        return Transaction(
            txn_id=orm.txn_id,
            asset_id=orm.asset_id,
            txn_type=orm.txn_type,
            quantity=Decimal(str(orm.quantity)),
            price=Decimal(str(orm.price)) if orm.price else Decimal("0"),
            txn_time_ist=to_ist(orm.txn_time_ist),
            external_id=orm.external_id,
            created_at_ist=to_ist(orm.created_at_ist) if orm.created_at_ist else None,
        )
