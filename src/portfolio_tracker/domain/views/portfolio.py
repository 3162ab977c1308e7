"""View models for the live portfolio snapshot."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_tracker.domain.models.enums import AssetType, AssetSource


@dataclass
class PortfolioLine:
    """A valued holding (or the synthetic aggregated gold line)."""

    asset_id: str
    symbol: str
    name: str
    asset_type: AssetType
    source: AssetSource
    quantity: Decimal
    average_price: Decimal
    invested_value: Decimal
    live_price: Decimal
    current_value: Decimal
    pnl: Decimal
    pnl_percent: Decimal
    last_updated_ist: Optional[datetime] = None


@dataclass
class PortfolioSummary:
    """Totals across every line of the snapshot."""

    total_invested: Decimal = field(default_factory=lambda: Decimal("0"))
    current_value: Decimal = field(default_factory=lambda: Decimal("0"))
    total_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    total_pnl_percent: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class PortfolioSnapshot:
    """Live dashboard snapshot: summary plus per-asset lines."""

    summary: PortfolioSummary
    assets: list[PortfolioLine] = field(default_factory=list)
    as_of: Optional[datetime] = None
