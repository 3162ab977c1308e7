"""View models for service outputs."""

from portfolio_tracker.domain.views.growth import (
    AssetBalance,
    BreakdownItem,
    DailyPortfolioPoint,
    GrowthWindow,
    GrowthSeries,
)
from portfolio_tracker.domain.views.portfolio import (
    PortfolioLine,
    PortfolioSummary,
    PortfolioSnapshot,
)

__all__ = [
    "AssetBalance",
    "BreakdownItem",
    "DailyPortfolioPoint",
    "GrowthWindow",
    "GrowthSeries",
    "PortfolioLine",
    "PortfolioSummary",
    "PortfolioSnapshot",
]
