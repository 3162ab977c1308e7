"""Asset endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from portfolio_tracker.api.deps import get_ledger_service
from portfolio_tracker.api.schemas import AssetCreateRequest, AssetResponse
from portfolio_tracker.domain.models import AssetType
from portfolio_tracker.services import AssetCreate, LedgerService

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.get("", response_model=list[AssetResponse])
def list_assets(
    asset_type: Optional[AssetType] = Query(None, alias="type"),
    ledger: LedgerService = Depends(get_ledger_service),
) -> list[AssetResponse]:
    return [AssetResponse.from_domain(a) for a in ledger.list_assets(asset_type)]


@router.post("", response_model=AssetResponse, status_code=201)
def create_asset(
    data: AssetCreateRequest,
    ledger: LedgerService = Depends(get_ledger_service),
) -> AssetResponse:
    """Register a holding; investedValue defaults to quantity * averagePrice."""
    asset = ledger.create_asset(
        AssetCreate(
            symbol=data.symbol,
            name=data.name,
            asset_type=data.asset_type,
            quantity=data.quantity,
            average_price=data.average_price,
            invested_value=data.invested_value,
            current_price=data.current_price,
            source=data.source,
        )
    )
    return AssetResponse.from_domain(asset)
