"""Transaction domain model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from portfolio_tracker.domain.models.enums import TransactionType


@dataclass
class Transaction:
    """
    Ledger entry for a BUY or SELL of one asset.

    Transactions are the only source of historical truth. Reconstruction works
    at day granularity through trade_date.
    """

    txn_id: str
    asset_id: str
    txn_type: TransactionType
    quantity: Decimal
    price: Decimal
    txn_time_ist: datetime
    external_id: Optional[str] = None
    created_at_ist: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            self.txn_type = TransactionType(self.txn_type)

    @property
    def trade_date(self) -> date:
        """Calendar date the transaction counts against."""
        return self.txn_time_ist.date()

    @property
    def amount(self) -> Decimal:
        """Gross value of the trade (quantity * price)."""
        return self.quantity * self.price
