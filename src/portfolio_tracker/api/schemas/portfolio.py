"""Pydantic schemas for the portfolio snapshot endpoint."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from portfolio_tracker.api.schemas.common import CamelModel, money, number
from portfolio_tracker.domain.models import AssetSource, AssetType
from portfolio_tracker.domain.views import PortfolioLine, PortfolioSnapshot


class PortfolioLineResponse(CamelModel):
    id: str
    symbol: str
    name: str
    asset_type: AssetType = Field(..., alias="type")
    source: AssetSource
    quantity: float
    average_price: float
    invested_value: float
    live_price: float
    current_value: float
    pnl: float
    pnl_percent: float
    last_updated: Optional[datetime] = None

    @classmethod
    def from_domain(cls, line: PortfolioLine) -> "PortfolioLineResponse":
        return cls(
            id=line.asset_id,
            symbol=line.symbol,
            name=line.name,
            asset_type=line.asset_type,
            source=line.source,
            quantity=number(line.quantity),
            average_price=money(line.average_price),
            invested_value=money(line.invested_value),
            live_price=money(line.live_price),
            current_value=money(line.current_value),
            pnl=money(line.pnl),
            pnl_percent=money(line.pnl_percent),
            last_updated=line.last_updated_ist,
        )


class PortfolioSummaryResponse(CamelModel):
    total_invested: float
    current_value: float
    total_pnl: float
    total_pnl_percent: float


class PortfolioResponse(CamelModel):
    summary: PortfolioSummaryResponse
    assets: list[PortfolioLineResponse]
    as_of: Optional[datetime] = None

    @classmethod
    def from_domain(cls, snapshot: PortfolioSnapshot) -> "PortfolioResponse":
        s = snapshot.summary
        return cls(
            summary=PortfolioSummaryResponse(
                total_invested=money(s.total_invested),
                current_value=money(s.current_value),
                total_pnl=money(s.total_pnl),
                total_pnl_percent=money(s.total_pnl_percent),
            ),
            assets=[PortfolioLineResponse.from_domain(line) for line in snapshot.assets],
            as_of=snapshot.as_of,
        )
