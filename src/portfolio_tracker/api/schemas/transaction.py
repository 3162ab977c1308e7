"""Pydantic schemas for transaction endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from portfolio_tracker.api.schemas.common import CamelModel, money, number
from portfolio_tracker.domain.models import Transaction, TransactionType


class TransactionCreateRequest(CamelModel):
    """Request schema for recording a BUY or SELL."""

    asset_id: str = Field(..., min_length=1)
    txn_type: TransactionType = Field(..., alias="type")
    quantity: Decimal = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    date: Optional[datetime] = Field(default=None, description="Trade time; naive values are IST. Defaults to now")
    external_id: Optional[str] = Field(default=None, max_length=64)


class TransactionResponse(CamelModel):
    """Response schema for a single transaction."""

    id: str
    asset_id: str
    txn_type: TransactionType = Field(..., alias="type")
    quantity: float
    price: float
    amount: float
    date: datetime
    external_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionResponse":
        return cls(
            id=txn.txn_id,
            asset_id=txn.asset_id,
            txn_type=txn.txn_type,
            quantity=number(txn.quantity),
            price=money(txn.price),
            amount=money(txn.amount),
            date=txn.txn_time_ist,
            external_id=txn.external_id,
            created_at=txn.created_at_ist,
        )
