"""Pydantic schemas for asset endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from portfolio_tracker.api.schemas.common import CamelModel, money, number
from portfolio_tracker.domain.models import Asset, AssetSource, AssetType


class AssetCreateRequest(CamelModel):
    """Request schema for registering a holding."""

    symbol: str = Field(..., min_length=1, max_length=64, description="Ticker, ISIN (MF) or GOLD_* id")
    name: str = Field(..., min_length=1, max_length=255)
    asset_type: AssetType = Field(..., alias="type")
    quantity: Decimal = Field(default=Decimal("0"), ge=0)
    average_price: Decimal = Field(default=Decimal("0"), ge=0)
    invested_value: Optional[Decimal] = Field(default=None, ge=0, description="Defaults to quantity * averagePrice")
    current_price: Optional[Decimal] = Field(default=None, ge=0, description="Broker-reported NAV (MF)")
    source: AssetSource = AssetSource.MANUAL


class AssetResponse(CamelModel):
    """Response schema for a single asset."""

    id: str
    symbol: str
    name: str
    asset_type: AssetType = Field(..., alias="type")
    source: AssetSource
    quantity: float
    average_price: float
    invested_value: float
    current_price: Optional[float] = None
    last_updated: Optional[datetime] = None

    @classmethod
    def from_domain(cls, asset: Asset) -> "AssetResponse":
        return cls(
            id=asset.asset_id,
            symbol=asset.symbol,
            name=asset.name,
            asset_type=asset.asset_type,
            source=asset.source,
            quantity=number(asset.quantity),
            average_price=money(asset.average_price),
            invested_value=money(asset.invested_value),
            current_price=money(asset.current_price),
            last_updated=asset.last_updated_ist,
        )
