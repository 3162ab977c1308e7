"""Price cache model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_tracker.domain.models.enums import AssetType


@dataclass
class PriceCacheEntry:
    """
    Last live price resolved for a (symbol, asset_type).

    Overwritten on every successful live resolution.
    """

    symbol: str
    asset_type: AssetType
    price: Decimal
    currency: str = "INR"
    last_fetched_ist: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.asset_type, str):
            self.asset_type = AssetType(self.asset_type)
