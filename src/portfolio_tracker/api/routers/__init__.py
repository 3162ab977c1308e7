"""API routers package."""

from portfolio_tracker.api.routers.assets import router as assets_router
from portfolio_tracker.api.routers.transactions import router as transactions_router
from portfolio_tracker.api.routers.gold import router as gold_router
from portfolio_tracker.api.routers.portfolio import router as portfolio_router
from portfolio_tracker.api.routers.analysis import router as analysis_router

__all__ = [
    "assets_router",
    "transactions_router",
    "gold_router",
    "portfolio_router",
    "analysis_router",
]
