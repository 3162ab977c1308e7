"""View models for the growth analysis (historical reconstruction)."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from portfolio_tracker.domain.models.enums import AssetType


@dataclass
class AssetBalance:
    """
    Per-run balance of one asset.

    Owned by a single reconstruction run; mutated only by replaying
    transactions and never written back to the ledger.
    """

    quantity: Decimal = field(default_factory=lambda: Decimal("0"))
    invested_value: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def average_cost(self) -> Decimal:
        """Weighted-average cost per unit (0 when nothing is held)."""
        if self.quantity > 0:
            return self.invested_value / self.quantity
        return Decimal("0")

    def copy(self) -> "AssetBalance":
        return AssetBalance(quantity=self.quantity, invested_value=self.invested_value)


@dataclass
class BreakdownItem:
    """One asset's contribution to a day's portfolio value."""

    name: str
    symbol: str
    asset_type: AssetType
    quantity: Decimal
    price: Decimal
    avg_price: Decimal
    value: Decimal
    invested: Decimal


@dataclass
class DailyPortfolioPoint:
    """Portfolio valuation on one calendar day."""

    date: date
    total_value: Decimal
    invested_value: Decimal
    profit: Decimal
    assets_breakdown: list[BreakdownItem] = field(default_factory=list)


@dataclass
class GrowthWindow:
    """Inclusive calendar-day range of a reconstruction run."""

    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass
class GrowthSeries:
    """Result of a growth analysis run."""

    window: Optional[GrowthWindow]
    points: list[DailyPortfolioPoint] = field(default_factory=list)
