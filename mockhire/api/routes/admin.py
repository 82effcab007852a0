"""
Admin endpoints.

Points grants and deductions are ordinary ledger entries, so they show up in
the user's history like any other movement. User blocks restrict access to
every authenticated route until lifted or expired.
"""
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mockhire.core.auth_dependency import CurrentUser, require_roles
from mockhire.core.exceptions import NotFoundError
from mockhire.db.models.user import User, UserRole
from mockhire.db.session import atomic, get_db
from mockhire.schemas.points import PointsAdjustRequest, TransactionResponse
from mockhire.schemas.user_block import UserBlockCreate, UserBlockListResponse, UserBlockResponse
from mockhire.services import ledger_service, user_block_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

require_admin = require_roles(UserRole.ADMIN)


def _ensure_user(db: Session, user_id: str) -> None:
    if not db.query(User.id).filter(User.id == user_id).first():
        raise NotFoundError("User", user_id)


@router.post("/users/{user_id}/points", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def grant_points(
    user_id: str,
    request: PointsAdjustRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _ensure_user(db, user_id)
    with atomic(db):
        transaction = ledger_service.earn(db, user_id, request.amount, request.description)
    logger.info(f"Admin points grant: admin_id={current_user.id}, user_id={user_id}, amount={request.amount}")
    return transaction


@router.post("/users/{user_id}/points/deduct", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def deduct_points(
    user_id: str,
    request: PointsAdjustRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Deduction is a SPENT entry and is refused if it would overdraw the user."""
    with atomic(db):
        transaction = ledger_service.spend(db, user_id, request.amount, request.description)
    logger.info(f"Admin points deduction: admin_id={current_user.id}, user_id={user_id}, amount={request.amount}")
    return transaction


# ============================================
# ✅ USER BLOCKS
# ============================================

@router.post("/user-blocks", response_model=UserBlockResponse, status_code=status.HTTP_201_CREATED)
def block_user(
    request: UserBlockCreate,
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    with atomic(db):
        block = user_block_service.block_user(
            db,
            request.user_id,
            request.reason,
            is_permanent=request.is_permanent,
            end_date=request.end_date,
        )
    logger.info(f"Admin block issued: admin_id={current_user.id}, user_id={request.user_id}")
    return block


@router.get("/user-blocks/active", response_model=UserBlockListResponse)
def list_active_blocks(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=user_block_service.MAX_PAGE_SIZE),
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    blocks, total = user_block_service.list_active_blocks(db, page=page, page_size=page_size)
    return UserBlockListResponse(
        blocks=[UserBlockResponse.model_validate(b) for b in blocks],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.get("/user-blocks/user/{user_id}", response_model=UserBlockListResponse)
def get_user_blocks(
    user_id: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=user_block_service.MAX_PAGE_SIZE),
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Full block history of a user, newest first."""
    blocks, total = user_block_service.get_user_blocks(db, user_id, page=page, page_size=page_size)
    return UserBlockListResponse(
        blocks=[UserBlockResponse.model_validate(b) for b in blocks],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.delete("/user-blocks/{block_id}", response_model=UserBlockResponse)
def unblock_user(
    block_id: str,
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    with atomic(db):
        block = user_block_service.unblock_user(db, block_id)
    logger.info(f"Admin block lifted: admin_id={current_user.id}, block_id={block_id}")
    return block
