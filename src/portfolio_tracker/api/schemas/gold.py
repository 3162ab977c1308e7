"""Pydantic schemas for manual gold endpoints."""

from decimal import Decimal
from typing import Optional

from portfolio_tracker.api.schemas.asset import AssetResponse
from portfolio_tracker.api.schemas.common import CamelModel


class GoldHoldingRequest(CamelModel):
    """
    Manual gold entry: total grams plus either the invested value or the
    price paid per gram. Presence and sign are checked by the ledger service.
    """

    total_grams: Optional[Decimal] = None
    invested_value: Optional[Decimal] = None
    price_per_gram: Optional[Decimal] = None
    name: Optional[str] = None


class GoldMutationResponse(CamelModel):
    message: str
    data: AssetResponse
