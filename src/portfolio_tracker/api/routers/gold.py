"""Manual gold holding endpoints."""

from fastapi import APIRouter, Depends

from portfolio_tracker.api.deps import get_ledger_service
from portfolio_tracker.api.schemas import AssetResponse, GoldHoldingRequest, GoldMutationResponse
from portfolio_tracker.services import GoldHoldingInput, LedgerService

router = APIRouter(prefix="/api/gold", tags=["gold"])


def _to_input(data: GoldHoldingRequest) -> GoldHoldingInput:
    return GoldHoldingInput(
        total_grams=data.total_grams,
        invested_value=data.invested_value,
        price_per_gram=data.price_per_gram,
        name=data.name,
    )


@router.get("", response_model=list[AssetResponse])
def list_gold(ledger: LedgerService = Depends(get_ledger_service)) -> list[AssetResponse]:
    """Every GOLD entry, regardless of source."""
    return [AssetResponse.from_domain(a) for a in ledger.list_gold()]


@router.post("", response_model=GoldMutationResponse, status_code=201)
def add_gold(
    data: GoldHoldingRequest,
    ledger: LedgerService = Depends(get_ledger_service),
) -> GoldMutationResponse:
    asset = ledger.add_gold(_to_input(data))
    return GoldMutationResponse(message="Gold holding added successfully", data=AssetResponse.from_domain(asset))


@router.put("/{asset_id}", response_model=GoldMutationResponse)
def edit_gold(
    asset_id: str,
    data: GoldHoldingRequest,
    ledger: LedgerService = Depends(get_ledger_service),
) -> GoldMutationResponse:
    asset = ledger.edit_gold(asset_id, _to_input(data))
    return GoldMutationResponse(message="Gold holding updated successfully", data=AssetResponse.from_domain(asset))


@router.delete("/{asset_id}", response_model=GoldMutationResponse)
def delete_gold(
    asset_id: str,
    ledger: LedgerService = Depends(get_ledger_service),
) -> GoldMutationResponse:
    asset = ledger.delete_gold(asset_id)
    return GoldMutationResponse(message="Gold holding deleted successfully", data=AssetResponse.from_domain(asset))
