"""Growth analysis endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from portfolio_tracker.api.deps import get_growth_service
from portfolio_tracker.api.schemas import GrowthResponse
from portfolio_tracker.services import GrowthService

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


@router.get("/growth", response_model=GrowthResponse)
def get_growth(
    start: Optional[date] = Query(None, description="Window start (default: a year back or first transaction)"),
    end: Optional[date] = Query(None, description="Window end (default: today, IST)"),
    growth: GrowthService = Depends(get_growth_service),
) -> GrowthResponse:
    """Daily portfolio value, invested value and profit with per-asset breakdown."""
    series = growth.growth_series(start=start, end=end)
    return GrowthResponse.from_domain(series)
