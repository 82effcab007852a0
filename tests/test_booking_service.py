"""
Unit tests for the booking lifecycle.
Tests booking creation, confirmation, cancellation refunds and interview completion.
"""
from datetime import timedelta

import pytest

from conftest import NOW, at
from mockhire.core.exceptions import (
    ConflictError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from mockhire.db.models import (
    Booking,
    BookingNotification,
    BookingStatus,
    InterviewStatus,
    NotificationType,
    PointsTransaction,
    SlotStatus,
    TimeSlot,
    TransactionType,
)
from mockhire.services import ledger_service, timeslot_service
from mockhire.services.booking_service import BookingService, compute_refund


@pytest.fixture
def service(db):
    return BookingService(db, clock=lambda: NOW)


@pytest.fixture
def slot(db, interviewer):
    slot = timeslot_service.create_slot(db, interviewer.id, at(48), at(49), "Python")
    db.commit()
    return slot


def _slot_at(db, interviewer, hours_from_now):
    slot = timeslot_service.create_slot(
        db, interviewer.id, at(hours_from_now), at(hours_from_now + 1), "Python"
    )
    db.commit()
    return slot


class FailingNotifier:
    def notify(self, db, user_id, booking_id, notification_type):
        raise RuntimeError("smtp down")


# ------------------------------------------------------------------
# compute_refund
# ------------------------------------------------------------------

@pytest.mark.parametrize("hours_before,expected", [
    (25, 10),
    (24, 10),
    (23.99, 5),
    (5, 5),
    (0.1, 5),
])
def test_compute_refund_tiers(hours_before, expected):
    assert compute_refund(10, NOW + timedelta(hours=hours_before), NOW) == expected


def test_compute_refund_rounds_down():
    assert compute_refund(7, at(1), NOW) == 3


def test_compute_refund_naive_start_treated_as_utc():
    assert compute_refund(10, at(30).replace(tzinfo=None), NOW) == 10


# ------------------------------------------------------------------
# create_booking
# ------------------------------------------------------------------

def test_create_booking(db, service, candidate, interviewer, slot, fund):
    fund(candidate, 10)

    booking = service.create_booking(candidate.id, slot.id)

    assert booking.status == BookingStatus.CREATED
    assert booking.points_spent == 10
    assert booking.candidate_id == candidate.id
    db.refresh(slot)
    assert slot.status == SlotStatus.BOOKED
    assert ledger_service.get_balance(db, candidate.id) == 0

    notified = {
        (n.user_id, n.type) for n in db.query(BookingNotification).all()
    }
    assert notified == {
        (candidate.id, NotificationType.CREATION),
        (interviewer.id, NotificationType.CREATION),
    }


def test_create_booking_unknown_slot(service, candidate, fund):
    fund(candidate, 10)
    with pytest.raises(NotFoundError):
        service.create_booking(candidate.id, "no-such-slot")


def test_no_double_booking(db, service, candidate, admin, slot, fund):
    fund(candidate, 10)
    fund(admin, 10)
    service.create_booking(candidate.id, slot.id)

    with pytest.raises(ConflictError) as exc_info:
        service.create_booking(admin.id, slot.id)

    assert exc_info.value.code == "slot_unavailable"
    assert db.query(Booking).count() == 1
    assert ledger_service.get_balance(db, admin.id) == 10


def test_cannot_book_own_slot(db, service, interviewer, slot, fund):
    fund(interviewer, 10)
    with pytest.raises(ValidationError) as exc_info:
        service.create_booking(interviewer.id, slot.id)
    assert exc_info.value.code == "self_booking"
    assert ledger_service.get_balance(db, interviewer.id) == 10


def test_cannot_book_past_slot(db, service, candidate, interviewer, fund):
    past = _slot_at(db, interviewer, -2)
    fund(candidate, 10)

    with pytest.raises(ValidationError) as exc_info:
        service.create_booking(candidate.id, past.id)
    assert exc_info.value.code == "slot_in_past"


def test_cannot_book_cancelled_slot(db, service, candidate, interviewer, slot, fund):
    timeslot_service.update_slot(db, slot.id, interviewer.id, {"status": SlotStatus.CANCELLED})
    db.commit()
    fund(candidate, 10)

    with pytest.raises(ConflictError):
        service.create_booking(candidate.id, slot.id)


def test_insufficient_balance_leaves_no_partial_state(db, service, candidate, slot, fund):
    fund(candidate, 5)

    with pytest.raises(InsufficientBalanceError) as exc_info:
        service.create_booking(candidate.id, slot.id)

    assert exc_info.value.to_detail()["required"] == 10
    assert exc_info.value.to_detail()["available"] == 5
    assert db.query(Booking).count() == 0
    assert db.query(TimeSlot).filter(TimeSlot.id == slot.id).one().status == SlotStatus.AVAILABLE
    assert ledger_service.get_balance(db, candidate.id) == 5


def test_failing_notifier_does_not_roll_back_booking(db, candidate, slot, fund):
    fund(candidate, 10)
    service = BookingService(db, notifier=FailingNotifier(), clock=lambda: NOW)

    booking = service.create_booking(candidate.id, slot.id)

    assert db.query(Booking).filter(Booking.id == booking.id).count() == 1
    assert ledger_service.get_balance(db, candidate.id) == 0


def test_booking_cost_frozen_at_creation(db, candidate, interviewer, slot, fund):
    fund(candidate, 20)
    booking = BookingService(db, booking_cost=15, clock=lambda: NOW).create_booking(candidate.id, slot.id)

    _, refund = BookingService(db, booking_cost=3, clock=lambda: NOW).cancel_booking(candidate.id, booking.id)

    assert booking.points_spent == 15
    assert refund == 15
    assert ledger_service.get_balance(db, candidate.id) == 20


# ------------------------------------------------------------------
# confirm_booking
# ------------------------------------------------------------------

def test_confirm_booking_creates_interview(db, service, candidate, interviewer, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)

    confirmed = service.confirm_booking(interviewer.id, booking.id)

    assert confirmed.status == BookingStatus.CONFIRMED
    interview = confirmed.interview
    assert interview is not None
    assert interview.status == InterviewStatus.SCHEDULED
    assert interview.interviewer_id == interviewer.id
    assert interview.participant_id == candidate.id
    assert interview.specialization == "Python"
    assert interview.duration == 60
    assert interview.video_link.endswith(f"/interview-{booking.id}")


def test_confirm_requires_slot_owner(service, candidate, other_interviewer, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)

    with pytest.raises(NotFoundError):
        service.confirm_booking(other_interviewer.id, booking.id)


def test_confirm_twice_rejected(db, service, candidate, interviewer, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)
    service.confirm_booking(interviewer.id, booking.id)

    with pytest.raises(ConflictError) as exc_info:
        service.confirm_booking(interviewer.id, booking.id)
    assert exc_info.value.code == "invalid_booking_state"


# ------------------------------------------------------------------
# cancel_booking
# ------------------------------------------------------------------

@pytest.mark.parametrize("hours_before,expected_refund", [
    (25, 10),
    (5, 5),
    (23.99, 5),
])
def test_cancel_refund_tiers(db, service, candidate, interviewer, fund, hours_before, expected_refund):
    slot = _slot_at(db, interviewer, hours_before)
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)

    cancelled, refund = service.cancel_booking(candidate.id, booking.id, "Schedule conflict")

    assert refund == expected_refund
    assert cancelled.status == BookingStatus.CANCELLED
    assert cancelled.cancel_reason == "Schedule conflict"
    assert ledger_service.get_balance(db, candidate.id) == expected_refund
    db.refresh(slot)
    assert slot.status == SlotStatus.AVAILABLE


def test_cancel_twice_changes_nothing(db, service, candidate, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)
    service.cancel_booking(candidate.id, booking.id)
    tx_count = db.query(PointsTransaction).count()

    with pytest.raises(ConflictError) as exc_info:
        service.cancel_booking(candidate.id, booking.id)

    assert exc_info.value.code == "booking_terminal"
    assert db.query(PointsTransaction).count() == tx_count
    assert ledger_service.get_balance(db, candidate.id) == 10
    db.refresh(slot)
    assert slot.status == SlotStatus.AVAILABLE


def test_cancel_by_other_user_not_found(service, candidate, admin, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)

    with pytest.raises(NotFoundError):
        service.cancel_booking(admin.id, booking.id)


def test_cancel_after_start_rejected(db, candidate, slot, fund):
    fund(candidate, 10)
    booking = BookingService(db, clock=lambda: NOW).create_booking(candidate.id, slot.id)

    late_service = BookingService(db, clock=lambda: at(48.5))
    with pytest.raises(ValidationError) as exc_info:
        late_service.cancel_booking(candidate.id, booking.id)
    assert exc_info.value.code == "booking_started"


def test_cancel_confirmed_booking_cancels_interview(db, service, candidate, interviewer, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)
    service.confirm_booking(interviewer.id, booking.id)

    cancelled, _ = service.cancel_booking(candidate.id, booking.id)

    assert cancelled.interview.status == InterviewStatus.CANCELLED


def test_slot_rebookable_after_cancel(db, service, candidate, admin, slot, fund):
    fund(candidate, 10)
    fund(admin, 10)
    booking = service.create_booking(candidate.id, slot.id)
    service.cancel_booking(candidate.id, booking.id)

    rebooked = service.create_booking(admin.id, slot.id)

    assert rebooked.status == BookingStatus.CREATED
    assert db.query(Booking).filter(Booking.slot_id == slot.id).count() == 2


def test_full_booking_scenario(db, service, candidate, interviewer, fund):
    """Book, confirm and cancel 30h ahead: the candidate is made whole."""
    slot = _slot_at(db, interviewer, 30)
    fund(candidate, 10)

    booking = service.create_booking(candidate.id, slot.id)
    assert ledger_service.get_balance(db, candidate.id) == 0

    service.confirm_booking(interviewer.id, booking.id)
    _, refund = service.cancel_booking(candidate.id, booking.id)

    assert refund == 10
    assert ledger_service.get_balance(db, candidate.id) == 10
    db.refresh(slot)
    assert slot.status == SlotStatus.AVAILABLE

    types = [
        t.type for t in ledger_service.get_history(db, candidate.id)
    ]
    assert types == [TransactionType.REFUNDED, TransactionType.SPENT, TransactionType.EARNED]


# ------------------------------------------------------------------
# complete_interview
# ------------------------------------------------------------------

def test_complete_interview_rewards_interviewer(db, service, candidate, interviewer, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)
    confirmed = service.confirm_booking(interviewer.id, booking.id)

    interview = service.complete_interview(interviewer.id, confirmed.interview_id)

    assert interview.status == InterviewStatus.COMPLETED
    assert ledger_service.get_balance(db, interviewer.id) == 1
    db.refresh(booking)
    assert booking.status == BookingStatus.COMPLETED


def test_complete_interview_twice_rejected(db, service, candidate, interviewer, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)
    confirmed = service.confirm_booking(interviewer.id, booking.id)
    service.complete_interview(interviewer.id, confirmed.interview_id)

    with pytest.raises(ConflictError) as exc_info:
        service.complete_interview(interviewer.id, confirmed.interview_id)

    assert exc_info.value.code == "invalid_interview_state"
    assert ledger_service.get_balance(db, interviewer.id) == 1


def test_complete_interview_wrong_interviewer(service, candidate, interviewer, other_interviewer, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)
    confirmed = service.confirm_booking(interviewer.id, booking.id)

    with pytest.raises(NotFoundError):
        service.complete_interview(other_interviewer.id, confirmed.interview_id)


def test_completed_booking_cannot_be_cancelled(service, candidate, interviewer, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)
    confirmed = service.confirm_booking(interviewer.id, booking.id)
    service.complete_interview(interviewer.id, confirmed.interview_id)

    with pytest.raises(ConflictError):
        service.cancel_booking(candidate.id, booking.id)


# ------------------------------------------------------------------
# Queries
# ------------------------------------------------------------------

def test_list_bookings_per_role(db, service, candidate, interviewer, other_interviewer, fund):
    first = _slot_at(db, interviewer, 30)
    second = _slot_at(db, other_interviewer, 40)
    fund(candidate, 20)
    b1 = service.create_booking(candidate.id, first.id)
    b2 = service.create_booking(candidate.id, second.id)

    assert [b.id for b in service.list_candidate_bookings(candidate.id)] == [b2.id, b1.id]
    assert [b.id for b in service.list_interviewer_bookings(interviewer.id)] == [b1.id]
    assert service.list_candidate_bookings(candidate.id, status=BookingStatus.CONFIRMED) == []
    ranged = service.list_candidate_bookings(candidate.id, start_date=at(35), end_date=at(45))
    assert [b.id for b in ranged] == [b2.id]


def test_get_booking_visibility(service, candidate, interviewer, other_interviewer, slot, fund):
    fund(candidate, 10)
    booking = service.create_booking(candidate.id, slot.id)

    assert service.get_booking(candidate.id, booking.id).id == booking.id
    assert service.get_booking(interviewer.id, booking.id).id == booking.id
    with pytest.raises(NotFoundError):
        service.get_booking(other_interviewer.id, booking.id)
