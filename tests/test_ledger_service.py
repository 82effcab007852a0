"""
Unit tests for the points ledger.
Tests balance folding, spend guard, refunds and history paging.
"""
import pytest

from mockhire.core.exceptions import InsufficientBalanceError, NotFoundError, ValidationError
from mockhire.db.models.points_transaction import PointsTransaction, TransactionType
from mockhire.services import ledger_service


def _tx(tx_type, amount):
    return PointsTransaction(user_id="u", amount=amount, type=tx_type, description="")


def test_compute_balance_empty():
    assert ledger_service.compute_balance([]) == 0


def test_compute_balance_order_independent():
    """Balance is the same fold regardless of transaction order."""
    txs = [
        _tx(TransactionType.EARNED, 20),
        _tx(TransactionType.SPENT, 10),
        _tx(TransactionType.REFUNDED, 5),
        _tx(TransactionType.SPENT, 3),
    ]
    assert ledger_service.compute_balance(txs) == 12
    assert ledger_service.compute_balance(list(reversed(txs))) == 12


def test_get_balance_new_user_is_zero(db, candidate):
    assert ledger_service.get_balance(db, candidate.id) == 0


def test_earn_spend_refund_round(db, candidate):
    ledger_service.earn(db, candidate.id, 10, "Signup bonus")
    ledger_service.spend(db, candidate.id, 10, "Booking")
    ledger_service.refund(db, candidate.id, 5, "Late cancellation")
    db.commit()

    assert ledger_service.get_balance(db, candidate.id) == 5


def test_spend_insufficient_balance_records_nothing(db, candidate, fund):
    """Spending more than the balance raises and leaves the ledger untouched."""
    fund(candidate, 5)

    with pytest.raises(InsufficientBalanceError) as exc_info:
        ledger_service.spend(db, candidate.id, 8, "Too expensive")
    db.rollback()

    assert exc_info.value.required == 8
    assert exc_info.value.available == 5
    assert exc_info.value.to_detail()["error"] == "insufficient_balance"
    assert ledger_service.get_balance(db, candidate.id) == 5
    assert db.query(PointsTransaction).filter(
        PointsTransaction.type == TransactionType.SPENT
    ).count() == 0


def test_spend_exact_balance_allowed(db, candidate, fund):
    fund(candidate, 10)
    ledger_service.spend(db, candidate.id, 10, "Booking")
    db.commit()
    assert ledger_service.get_balance(db, candidate.id) == 0


def test_spend_unknown_user(db):
    with pytest.raises(NotFoundError):
        ledger_service.spend(db, "missing-user", 1, "Nothing")


@pytest.mark.parametrize("amount", [0, -5, True, 1.5, "10"])
def test_invalid_amounts_rejected(db, candidate, amount):
    for operation in (ledger_service.earn, ledger_service.spend, ledger_service.refund):
        with pytest.raises(ValidationError) as exc_info:
            operation(db, candidate.id, amount, "Bad amount")
        assert exc_info.value.code == "invalid_amount"

    assert ledger_service.get_balance(db, candidate.id) == 0


def test_history_newest_first_and_paginated(db, candidate):
    for i in range(1, 6):
        ledger_service.earn(db, candidate.id, i, f"Grant {i}")
    db.commit()

    first_page = ledger_service.get_history(db, candidate.id, page=1, page_size=2)
    second_page = ledger_service.get_history(db, candidate.id, page=2, page_size=2)
    last_page = ledger_service.get_history(db, candidate.id, page=3, page_size=2)

    assert [t.amount for t in first_page] == [5, 4]
    assert [t.amount for t in second_page] == [3, 2]
    assert [t.amount for t in last_page] == [1]
    assert ledger_service.get_history(db, candidate.id, page=4, page_size=2) == []


def test_history_only_own_transactions(db, candidate, interviewer):
    ledger_service.earn(db, candidate.id, 3, "Mine")
    ledger_service.earn(db, interviewer.id, 7, "Theirs")
    db.commit()

    history = ledger_service.get_history(db, candidate.id)
    assert [t.amount for t in history] == [3]


@pytest.mark.parametrize("page,page_size,code", [
    (0, 20, "invalid_page"),
    (1, 0, "invalid_page_size"),
    (1, 101, "invalid_page_size"),
])
def test_history_invalid_paging(db, candidate, page, page_size, code):
    with pytest.raises(ValidationError) as exc_info:
        ledger_service.get_history(db, candidate.id, page=page, page_size=page_size)
    assert exc_info.value.code == code
