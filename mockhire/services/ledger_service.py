"""
Points ledger service.

Point movements are recorded as immutable PointsTransaction rows; a user's
balance is never stored, it is always the fold of their history.

Functions here flush but never commit: the caller owns the transaction
boundary (see ``mockhire.db.session.atomic``) so that a spend can be combined
atomically with other writes, e.g. reserving a slot.
"""
import logging
from typing import Iterable, List

from sqlalchemy.orm import Session

from mockhire.core.exceptions import InsufficientBalanceError, NotFoundError, ValidationError
from mockhire.db.models.points_transaction import PointsTransaction, TransactionType
from mockhire.db.models.user import User

logger = logging.getLogger(__name__)

CREDIT_TYPES = (TransactionType.EARNED, TransactionType.REFUNDED)

MAX_PAGE_SIZE = 100


def compute_balance(transactions: Iterable[PointsTransaction]) -> int:
    """
    Fold a sequence of transactions into a balance.

    EARNED and REFUNDED add, SPENT subtracts. Order does not matter.
    """
    balance = 0
    for transaction in transactions:
        if transaction.type in CREDIT_TYPES:
            balance += transaction.amount
        else:
            balance -= transaction.amount
    return balance


def _validate_amount(amount) -> None:
    # bool is an int subclass, reject it explicitly
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError(
            f"Amount must be a positive integer, got {amount!r}",
            code="invalid_amount",
        )


def _append(db: Session, user_id: str, amount: int, tx_type: TransactionType, description: str) -> PointsTransaction:
    transaction = PointsTransaction(
        user_id=user_id,
        amount=amount,
        type=tx_type,
        description=description or "",
    )
    db.add(transaction)
    db.flush()
    return transaction


def lock_user_ledger(db: Session, user_id: str) -> User:
    """
    Take a row lock on the user so concurrent spends by the same user
    serialize. Locking scope is per user, never global.
    """
    user = db.query(User).filter(User.id == user_id).with_for_update().first()
    if not user:
        raise NotFoundError("User", user_id)
    return user


def get_balance(db: Session, user_id: str) -> int:
    """
    Get a user's current balance.

    Args:
        db: Database session
        user_id: User ID

    Returns:
        Balance folded over all transactions (0 when there are none)
    """
    transactions = db.query(PointsTransaction).filter(PointsTransaction.user_id == user_id).all()
    return compute_balance(transactions)


def get_history(db: Session, user_id: str, page: int = 1, page_size: int = 20) -> List[PointsTransaction]:
    """
    Get a page of a user's transactions, newest first.

    Args:
        db: Database session
        user_id: User ID
        page: 1-based page number
        page_size: Items per page (1..100)

    Returns:
        List of PointsTransaction rows
    """
    if page < 1:
        raise ValidationError("Page must be >= 1", code="invalid_page")
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}", code="invalid_page_size")

    return (
        db.query(PointsTransaction)
        .filter(PointsTransaction.user_id == user_id)
        .order_by(PointsTransaction.created_at.desc(), PointsTransaction.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )


def earn(db: Session, user_id: str, amount: int, description: str) -> PointsTransaction:
    """Append an EARNED transaction."""
    _validate_amount(amount)
    transaction = _append(db, user_id, amount, TransactionType.EARNED, description)
    logger.info(f"Points earned: user_id={user_id}, amount={amount}")
    return transaction


def spend(db: Session, user_id: str, amount: int, description: str) -> PointsTransaction:
    """
    Append a SPENT transaction if the user can afford it.

    The balance check and the append happen under a row lock on the user, so
    two concurrent spends cannot both pass against a stale balance.

    Raises:
        ValidationError: amount is not a positive integer
        NotFoundError: user does not exist
        InsufficientBalanceError: balance < amount (nothing is recorded)
    """
    _validate_amount(amount)
    lock_user_ledger(db, user_id)

    balance = get_balance(db, user_id)
    if balance < amount:
        logger.warning(
            f"Spend rejected: user_id={user_id}, required={amount}, available={balance}"
        )
        raise InsufficientBalanceError(required=amount, available=balance)

    transaction = _append(db, user_id, amount, TransactionType.SPENT, description)
    logger.info(f"Points spent: user_id={user_id}, amount={amount}, balance={balance - amount}")
    return transaction


def refund(db: Session, user_id: str, amount: int, description: str) -> PointsTransaction:
    """Append a REFUNDED transaction. Refunds only add, so there is no balance check."""
    _validate_amount(amount)
    transaction = _append(db, user_id, amount, TransactionType.REFUNDED, description)
    logger.info(f"Points refunded: user_id={user_id}, amount={amount}")
    return transaction
