"""
Admin moderation: blocking and unblocking users.

A user has at most one active block. A temporary block stops being in effect
at its end date even while its row is still flagged active; such a lapsed
block is closed out when a new block is issued.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from mockhire.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from mockhire.core.timeutils import as_utc, utcnow
from mockhire.db.models.user import User
from mockhire.db.models.user_block import UserBlock

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _validate_paging(page: int, page_size: int) -> None:
    if page < 1:
        raise ValidationError("Page must be >= 1", code="invalid_page")
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}", code="invalid_page_size")


def _in_effect_filter(now: datetime):
    return (
        UserBlock.is_active.is_(True),
        or_(UserBlock.is_permanent.is_(True), UserBlock.end_date > as_utc(now)),
    )


def get_active_block(db: Session, user_id: str, now: Optional[datetime] = None) -> Optional[UserBlock]:
    """The block currently in effect for a user, if any."""
    return db.query(UserBlock).filter(
        UserBlock.user_id == user_id,
        *_in_effect_filter(now or utcnow()),
    ).first()


def ensure_not_blocked(db: Session, user_id: str, now: Optional[datetime] = None) -> None:
    """
    Raises:
        ForbiddenError: the user has a block in effect
    """
    block = get_active_block(db, user_id, now)
    if block is not None:
        detail = {"block_id": block.id, "is_permanent": block.is_permanent}
        if block.end_date is not None:
            detail["end_date"] = as_utc(block.end_date).isoformat()
        raise ForbiddenError(f"User is blocked: {block.reason}", code="user_blocked", **detail)


def block_user(
    db: Session,
    user_id: str,
    reason: str,
    is_permanent: bool = False,
    end_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> UserBlock:
    """
    Block a user permanently or until ``end_date``.

    Raises:
        ValidationError: missing reason, or end date inconsistent with is_permanent
        NotFoundError: user does not exist
        ConflictError: the user already has a block in effect
    """
    now = as_utc(now or utcnow())
    if reason is None or not reason.strip():
        raise ValidationError("Block reason is required", code="invalid_block_reason")
    if is_permanent and end_date is not None:
        raise ValidationError("Permanent blocks take no end date", code="invalid_block_period")
    if not is_permanent:
        if end_date is None:
            raise ValidationError("Temporary blocks need an end date", code="invalid_block_period")
        if as_utc(end_date) <= now:
            raise ValidationError("Block end date must be in the future", code="invalid_block_period")

    user = db.query(User).filter(User.id == user_id).with_for_update().first()
    if not user:
        raise NotFoundError("User", user_id)

    current = db.query(UserBlock).filter(
        UserBlock.user_id == user_id,
        UserBlock.is_active.is_(True),
    ).first()
    if current is not None:
        if current.is_in_effect(now):
            raise ConflictError(
                "User already has an active block",
                code="user_already_blocked",
                block_id=current.id,
            )
        # Lapsed temporary block
        current.is_active = False
        db.flush()

    block = UserBlock(
        user_id=user_id,
        reason=reason.strip(),
        is_permanent=is_permanent,
        start_date=now,
        end_date=None if is_permanent else as_utc(end_date),
        is_active=True,
    )
    db.add(block)
    db.flush()

    logger.info(f"User blocked: user_id={user_id}, block_id={block.id}, permanent={is_permanent}")
    return block


def unblock_user(db: Session, block_id: str) -> UserBlock:
    """Deactivate a block. Raises ConflictError if it is already inactive."""
    block = db.query(UserBlock).filter(UserBlock.id == block_id).with_for_update().first()
    if not block:
        raise NotFoundError("UserBlock", block_id)
    if not block.is_active:
        raise ConflictError("Block is already inactive", code="block_inactive")

    block.is_active = False
    db.flush()
    logger.info(f"User unblocked: user_id={block.user_id}, block_id={block_id}")
    return block


def get_user_blocks(db: Session, user_id: str, page: int = 1, page_size: int = 20) -> Tuple[List[UserBlock], int]:
    """A user's block history, newest first, with the total count."""
    _validate_paging(page, page_size)
    if not db.query(User.id).filter(User.id == user_id).first():
        raise NotFoundError("User", user_id)

    query = db.query(UserBlock).filter(UserBlock.user_id == user_id)
    total = query.count()
    blocks = (
        query.order_by(UserBlock.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return blocks, total


def list_active_blocks(
    db: Session,
    page: int = 1,
    page_size: int = 20,
    now: Optional[datetime] = None,
) -> Tuple[List[UserBlock], int]:
    """Blocks currently in effect across all users, newest first."""
    _validate_paging(page, page_size)
    query = db.query(UserBlock).filter(*_in_effect_filter(now or utcnow()))
    total = query.count()
    blocks = (
        query.order_by(UserBlock.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return blocks, total
