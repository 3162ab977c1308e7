"""Pydantic schemas for the growth analysis endpoint."""

from datetime import date
from typing import Optional

from pydantic import Field

from portfolio_tracker.api.schemas.common import CamelModel, money, number
from portfolio_tracker.domain.models import AssetType
from portfolio_tracker.domain.views import BreakdownItem, DailyPortfolioPoint, GrowthSeries


class BreakdownItemResponse(CamelModel):
    name: str
    symbol: str
    asset_type: AssetType = Field(..., alias="type")
    quantity: float
    price: float
    avg_price: float
    value: float
    invested: float

    @classmethod
    def from_domain(cls, item: BreakdownItem) -> "BreakdownItemResponse":
        return cls(
            name=item.name,
            symbol=item.symbol,
            asset_type=item.asset_type,
            quantity=number(item.quantity),
            price=money(item.price),
            avg_price=money(item.avg_price),
            value=money(item.value),
            invested=money(item.invested),
        )


class GrowthPointResponse(CamelModel):
    """Portfolio valuation on one day."""

    date: date
    total_value: float
    invested_value: float
    profit: float
    assets_breakdown: list[BreakdownItemResponse]

    @classmethod
    def from_domain(cls, point: DailyPortfolioPoint) -> "GrowthPointResponse":
        return cls(
            date=point.date,
            total_value=money(point.total_value),
            invested_value=money(point.invested_value),
            profit=money(point.profit),
            assets_breakdown=[BreakdownItemResponse.from_domain(i) for i in point.assets_breakdown],
        )


class GrowthResponse(CamelModel):
    """Daily series, oldest first, starting at the first day with value."""

    data: list[GrowthPointResponse]
    start: Optional[date] = None
    end: Optional[date] = None

    @classmethod
    def from_domain(cls, series: GrowthSeries) -> "GrowthResponse":
        return cls(
            data=[GrowthPointResponse.from_domain(p) for p in series.points],
            start=series.window.start if series.window else None,
            end=series.window.end if series.window else None,
        )
