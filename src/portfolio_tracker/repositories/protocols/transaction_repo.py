"""Transaction repository protocol."""

from typing import Protocol, Optional

from portfolio_tracker.domain.models import Transaction


class TransactionRepository(Protocol):
    """Interface for transaction (ledger) data access."""

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        ...

    def get_by_id(self, txn_id: str) -> Optional[Transaction]:
        """Retrieve transaction by ID."""
        ...

    def list_all(self) -> list[Transaction]:
        """List all transactions, ordered by date then insertion order."""
        ...

    def list_by_asset(self, asset_id: str) -> list[Transaction]:
        """List one asset's transactions, ordered by date then insertion order."""
        ...

    def delete_by_asset(self, asset_id: str) -> None:
        """Delete every transaction of an asset."""
        ...
