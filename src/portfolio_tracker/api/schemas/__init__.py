"""Pydantic schemas for API request/response."""

from portfolio_tracker.api.schemas.asset import AssetCreateRequest, AssetResponse
from portfolio_tracker.api.schemas.transaction import TransactionCreateRequest, TransactionResponse
from portfolio_tracker.api.schemas.gold import GoldHoldingRequest, GoldMutationResponse
from portfolio_tracker.api.schemas.growth import (
    BreakdownItemResponse,
    GrowthPointResponse,
    GrowthResponse,
)
from portfolio_tracker.api.schemas.portfolio import (
    PortfolioLineResponse,
    PortfolioSummaryResponse,
    PortfolioResponse,
)

__all__ = [
    "AssetCreateRequest",
    "AssetResponse",
    "TransactionCreateRequest",
    "TransactionResponse",
    "GoldHoldingRequest",
    "GoldMutationResponse",
    "BreakdownItemResponse",
    "GrowthPointResponse",
    "GrowthResponse",
    "PortfolioLineResponse",
    "PortfolioSummaryResponse",
    "PortfolioResponse",
]
