"""Asset domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_tracker.domain.models.enums import AssetType, AssetSource


@dataclass
class Asset:
    """
    Current holding of one instrument.

    The asset's quantity and invested value are the authoritative final state.
    They are not necessarily derivable from the recorded transactions, since
    history may be partial. invested_value is tracked independently of
    quantity * average_price and may drift from it after sells.
    """

    asset_id: str
    symbol: str
    name: str
    asset_type: AssetType
    quantity: Decimal = field(default_factory=lambda: Decimal("0"))
    average_price: Decimal = field(default_factory=lambda: Decimal("0"))
    invested_value: Decimal = field(default_factory=lambda: Decimal("0"))
    source: AssetSource = AssetSource.MANUAL
    current_price: Optional[Decimal] = None  # Broker-supplied NAV (MF only)
    last_updated_ist: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.asset_type, str):
            self.asset_type = AssetType(self.asset_type)
        if isinstance(self.source, str):
            self.source = AssetSource(self.source)
        self.symbol = self.symbol.strip().upper()

    @property
    def cost_per_unit(self) -> Decimal:
        """Recorded average price, else invested value spread over quantity."""
        if self.average_price > 0:
            return self.average_price
        if self.quantity > 0:
            return self.invested_value / self.quantity
        return Decimal("0")
