from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mockhire.core.auth_dependency import CurrentUser, get_current_user
from mockhire.db.session import get_db
from mockhire.schemas.points import BalanceResponse, TransactionListResponse, TransactionResponse
from mockhire.services import ledger_service

router = APIRouter(prefix="/points", tags=["Points"])


@router.get("/balance", response_model=BalanceResponse)
def get_balance(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return BalanceResponse(balance=ledger_service.get_balance(db, current_user.id))


@router.get("/transactions", response_model=TransactionListResponse)
def get_transactions(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=ledger_service.MAX_PAGE_SIZE),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Transaction history, newest first."""
    transactions = ledger_service.get_history(db, current_user.id, page=page, page_size=page_size)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        page=page,
        page_size=page_size,
    )
