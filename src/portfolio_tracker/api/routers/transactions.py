"""Transaction endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from portfolio_tracker.api.deps import get_ledger_service
from portfolio_tracker.api.schemas import TransactionCreateRequest, TransactionResponse
from portfolio_tracker.services import LedgerService, TransactionCreate

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    asset_id: Optional[str] = Query(None, alias="assetId"),
    ledger: LedgerService = Depends(get_ledger_service),
) -> list[TransactionResponse]:
    """Transactions in date order."""
    return [TransactionResponse.from_domain(t) for t in ledger.list_transactions(asset_id)]


@router.post("", response_model=TransactionResponse, status_code=201)
def add_transaction(
    data: TransactionCreateRequest,
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    txn = ledger.add_transaction(
        TransactionCreate(
            asset_id=data.asset_id,
            txn_type=data.txn_type,
            quantity=data.quantity,
            price=data.price,
            txn_time_ist=data.date,
            external_id=data.external_id,
        )
    )
    return TransactionResponse.from_domain(txn)
