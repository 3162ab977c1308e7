"""Ledger service: assets, transactions and manual gold holdings."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_tracker.core.exceptions import ValidationError, NotFoundError
from portfolio_tracker.core.timezone import now_ist, to_ist
from portfolio_tracker.domain.models import (
    Asset,
    AssetSource,
    AssetType,
    Transaction,
    TransactionType,
)
from portfolio_tracker.repositories.protocols import AssetRepository, TransactionRepository

ZERO = Decimal("0")


@dataclass
class AssetCreate:
    """Input data for registering a holding."""

    symbol: str
    name: str
    asset_type: AssetType
    quantity: Decimal = ZERO
    average_price: Decimal = ZERO
    invested_value: Optional[Decimal] = None
    current_price: Optional[Decimal] = None
    source: AssetSource = AssetSource.MANUAL


@dataclass
class TransactionCreate:
    """Input data for recording a BUY or SELL."""

    asset_id: str
    txn_type: TransactionType
    quantity: Decimal
    price: Decimal
    txn_time_ist: Optional[datetime] = None
    external_id: Optional[str] = None


@dataclass
class GoldHoldingInput:
    """
    Manual gold entry.

    Either invested_value or price_per_gram must be given; when both are,
    price_per_gram wins and invested value is derived from it.
    """

    total_grams: Decimal
    invested_value: Optional[Decimal] = None
    price_per_gram: Optional[Decimal] = None
    name: Optional[str] = None


class LedgerService:
    """
    Maintains the ledger the growth analysis reads.

    Assets hold the authoritative current state; transactions are the partial
    history. Recording a transaction does not change the asset's state.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        transaction_repo: TransactionRepository,
    ):
        self._asset_repo = asset_repo
        self._transaction_repo = transaction_repo

    # -------------------------------------------------------------------------
    # Assets
    # -------------------------------------------------------------------------

    def create_asset(self, data: AssetCreate) -> Asset:
        """
        Register a holding.

        invested_value defaults to quantity * average_price.
        """
        symbol = (data.symbol or "").strip().upper()
        if not symbol or not (data.name or "").strip():
            raise ValidationError("Asset requires a symbol and a name")
        if data.quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        if data.average_price < 0:
            raise ValidationError("Average price cannot be negative")
        if data.invested_value is not None and data.invested_value < 0:
            raise ValidationError("Invested value cannot be negative")
        if self._asset_repo.get_by_symbol(symbol, data.asset_type):
            raise ValidationError(f"{data.asset_type.value} asset '{symbol}' already exists")

        invested = data.invested_value
        if invested is None:
            invested = data.quantity * data.average_price

        asset = Asset(
            asset_id=str(uuid.uuid4()),
            symbol=symbol,
            name=data.name.strip(),
            asset_type=data.asset_type,
            quantity=data.quantity,
            average_price=data.average_price,
            invested_value=invested,
            source=data.source,
            current_price=data.current_price,
            last_updated_ist=now_ist(),
        )
        return self._asset_repo.create(asset)

    def get_asset(self, asset_id: str) -> Asset:
        """Get asset by ID."""
        asset = self._asset_repo.get_by_id(asset_id)
        if not asset:
            raise NotFoundError("Asset", asset_id)
        return asset

    def list_assets(self, asset_type: Optional[AssetType] = None) -> list[Asset]:
        if asset_type is not None:
            return self._asset_repo.list_by_type(asset_type)
        return self._asset_repo.list_all()

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def add_transaction(self, data: TransactionCreate) -> Transaction:
        """Record a transaction against an existing asset."""
        self.get_asset(data.asset_id)
        if data.quantity is None or data.quantity <= 0:
            raise ValidationError(f"{data.txn_type.value} requires quantity > 0")
        if data.price is None or data.price < 0:
            raise ValidationError(f"{data.txn_type.value} requires price >= 0")

        if data.external_id:
            for existing in self._transaction_repo.list_by_asset(data.asset_id):
                if existing.external_id == data.external_id:
                    raise ValidationError(f"Transaction '{data.external_id}' already recorded")

        now = now_ist()
        transaction = Transaction(
            txn_id=str(uuid.uuid4()),
            asset_id=data.asset_id,
            txn_type=data.txn_type,
            quantity=data.quantity,
            price=data.price,
            txn_time_ist=to_ist(data.txn_time_ist) if data.txn_time_ist else now,
            external_id=data.external_id,
            created_at_ist=now,
        )
        return self._transaction_repo.create(transaction)

    def list_transactions(self, asset_id: Optional[str] = None) -> list[Transaction]:
        """Transactions in date order (ties in recording order)."""
        if asset_id is not None:
            return self._transaction_repo.list_by_asset(asset_id)
        return self._transaction_repo.list_all()

    # -------------------------------------------------------------------------
    # Manual gold
    # -------------------------------------------------------------------------

    def list_gold(self) -> list[Asset]:
        return self._asset_repo.list_by_type(AssetType.GOLD)

    def add_gold(self, data: GoldHoldingInput) -> Asset:
        """Create a new manual gold entry under a unique symbol."""
        quantity, invested, average = self._gold_values(data)
        asset = Asset(
            asset_id=str(uuid.uuid4()),
            symbol=f"GOLD_{uuid.uuid4().hex[:12]}",
            name=(data.name or "").strip() or "Manual Gold",
            asset_type=AssetType.GOLD,
            quantity=quantity,
            average_price=average,
            invested_value=invested,
            source=AssetSource.MANUAL,
            last_updated_ist=now_ist(),
        )
        return self._asset_repo.create(asset)

    def edit_gold(self, asset_id: str, data: GoldHoldingInput) -> Asset:
        """Replace the grams and cost of a gold entry; the name changes only if given."""
        asset = self._get_gold(asset_id)
        quantity, invested, average = self._gold_values(data)
        asset.quantity = quantity
        asset.invested_value = invested
        asset.average_price = average
        if data.name and data.name.strip():
            asset.name = data.name.strip()
        asset.last_updated_ist = now_ist()
        return self._asset_repo.update(asset)

    def delete_gold(self, asset_id: str) -> Asset:
        """Delete a gold entry and its transactions; returns the deleted entry."""
        asset = self._get_gold(asset_id)
        self._transaction_repo.delete_by_asset(asset_id)
        self._asset_repo.delete(asset_id)
        return asset

    def _get_gold(self, asset_id: str) -> Asset:
        asset = self._asset_repo.get_by_id(asset_id)
        if not asset or asset.asset_type != AssetType.GOLD:
            raise NotFoundError("Gold holding", asset_id)
        return asset

    @staticmethod
    def _gold_values(data: GoldHoldingInput) -> tuple[Decimal, Decimal, Decimal]:
        """Validate a gold entry; returns (quantity, invested_value, average_price)."""
        if data.total_grams is None:
            raise ValidationError("Please provide totalGrams")
        if data.invested_value is None and data.price_per_gram is None:
            raise ValidationError("Please provide either investedValue or pricePerGram")
        quantity = data.total_grams
        if quantity < 0:
            raise ValidationError("Invalid quantity provided")

        if data.price_per_gram is not None:
            if data.price_per_gram < 0:
                raise ValidationError("Invalid pricePerGram provided")
            return quantity, quantity * data.price_per_gram, data.price_per_gram

        if data.invested_value < 0:
            raise ValidationError("Invalid investedValue provided")
        average = data.invested_value / quantity if quantity > 0 else ZERO
        return quantity, data.invested_value, average
