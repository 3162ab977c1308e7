"""Asset repository protocol."""

from typing import Protocol, Optional

from portfolio_tracker.domain.models import Asset, AssetType


class AssetRepository(Protocol):
    """Interface for asset (current holdings) data access."""

    def create(self, asset: Asset) -> Asset:
        """Persist a new asset."""
        ...

    def get_by_id(self, asset_id: str) -> Optional[Asset]:
        """Retrieve asset by ID."""
        ...

    def get_by_symbol(self, symbol: str, asset_type: AssetType) -> Optional[Asset]:
        """Retrieve asset by its unique (symbol, type) pair."""
        ...

    def list_all(self) -> list[Asset]:
        """List all assets."""
        ...

    def list_by_type(self, asset_type: AssetType) -> list[Asset]:
        """List assets of one class."""
        ...

    def update(self, asset: Asset) -> Asset:
        """Update an existing asset."""
        ...

    def delete(self, asset_id: str) -> None:
        """Delete an asset (hard delete)."""
        ...
