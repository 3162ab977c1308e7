"""Live portfolio endpoint."""

from fastapi import APIRouter, Depends

from portfolio_tracker.api.deps import get_portfolio_aggregator
from portfolio_tracker.api.schemas import PortfolioResponse
from portfolio_tracker.services import PortfolioAggregator

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


@router.get("", response_model=PortfolioResponse)
def get_portfolio(
    aggregator: PortfolioAggregator = Depends(get_portfolio_aggregator),
) -> PortfolioResponse:
    """Every holding at its live price, gold merged into one line, plus totals."""
    return PortfolioResponse.from_domain(aggregator.snapshot())
