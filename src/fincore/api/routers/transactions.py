"""Transaction ledger endpoints."""

from fastapi import APIRouter, Depends, Query

from fincore.api.deps import get_ledger_service
from fincore.api.schemas import (
    TransactionCreateRequest,
    TransactionResponse,
    TransactionPageResponse,
    TransactionReportResponse,
)
from fincore.services import LedgerService

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreateRequest,
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransactionResponse:
    """Record a BUY or SELL at the given price."""
    txn = ledger.record_transaction(
        user_id=data.user_id,
        ticker=data.ticker,
        txn_type=data.txn_type,
        quantity=data.quantity,
        price=data.price,
    )
    return TransactionResponse.model_validate(txn)


@router.get("/user/{user_id}", response_model=TransactionPageResponse)
def list_user_transactions(
    user_id: str,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransactionPageResponse:
    """List a user's transactions, newest first (0-based pages)."""
    result = ledger.list_transactions(user_id, page=page, size=size)
    return TransactionPageResponse(
        items=[TransactionResponse.model_validate(t) for t in result.items],
        page=result.page,
        size=result.size,
        total_items=result.total_items,
        total_pages=result.total_pages,
    )


@router.get("/report/{user_id}", response_model=TransactionReportResponse)
def get_report(
    user_id: str,
    ledger: LedgerService = Depends(get_ledger_service),
) -> TransactionReportResponse:
    """Buy/sell totals and net position per ticker for a user."""
    return TransactionReportResponse.model_validate(ledger.generate_report(user_id))
