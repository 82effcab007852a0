"""
Booking lifecycle service.

Orchestrates slot reservation, points debit, status transitions, refund
computation and interview materialization. Every state-changing operation
runs as one database transaction: slot, booking and ledger change together
or not at all.

State machine per booking:
    CREATED -> CONFIRMED -> COMPLETED
    CREATED -> CANCELLED, CONFIRMED -> CANCELLED
CANCELLED and COMPLETED are terminal.
"""
import logging
import math
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mockhire.core import config
from mockhire.core.exceptions import ConflictError, NotFoundError, ValidationError
from mockhire.core.timeutils import as_utc, utcnow
from mockhire.db.models.booking import Booking, BookingStatus
from mockhire.db.models.booking_notification import NotificationType
from mockhire.db.models.interview import Interview, InterviewStatus
from mockhire.db.models.time_slot import TimeSlot, SlotStatus
from mockhire.db.session import atomic
from mockhire.services import ledger_service, user_block_service
from mockhire.services.notification_service import BookingNotificationSink, NotificationSink

logger = logging.getLogger(__name__)


def compute_refund(
    points_spent: int,
    start_time: datetime,
    now: datetime,
    threshold_hours: float = 24,
    partial_ratio: float = 0.5,
) -> int:
    """
    Refund owed when a booking is cancelled at ``now``.

    Full refund at or beyond the threshold, otherwise the partial ratio
    rounded down. The threshold is a hard cutoff.
    """
    hours_until_start = (as_utc(start_time) - as_utc(now)).total_seconds() / 3600
    if hours_until_start >= threshold_hours:
        return points_spent
    return math.floor(points_spent * partial_ratio)


class BookingService:
    """
    Service layer for booking operations.

    Points constants are injected so tests (and future pricing) can vary
    them; a booking's ``points_spent`` is frozen at creation regardless.
    """

    def __init__(
        self,
        db: Session,
        booking_cost: int = config.BOOKING_COST,
        interviewer_reward: int = config.INTERVIEWER_REWARD,
        refund_hours_threshold: float = config.REFUND_HOURS_THRESHOLD,
        partial_refund_ratio: float = config.PARTIAL_REFUND_RATIO,
        notifier: Optional[NotificationSink] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.booking_cost = booking_cost
        self.interviewer_reward = interviewer_reward
        self.refund_hours_threshold = refund_hours_threshold
        self.partial_refund_ratio = partial_refund_ratio
        self.notifier = notifier or BookingNotificationSink()
        self.clock = clock

    def _now(self) -> datetime:
        return as_utc(self.clock())

    def _notify(self, user_ids: List[str], booking_id: str, notification_type: NotificationType) -> None:
        for user_id in user_ids:
            try:
                self.notifier.notify(self.db, user_id, booking_id, notification_type)
            except Exception as e:
                logger.warning(
                    f"Notification sink failed: user_id={user_id}, booking_id={booking_id}, "
                    f"type={notification_type.value}, error={e}"
                )

    def _lock_slot(self, slot_id: str) -> Optional[TimeSlot]:
        return self.db.query(TimeSlot).filter(TimeSlot.id == slot_id).with_for_update().first()

    def _lock_booking(self, booking_id: str) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).with_for_update().first()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_booking(self, candidate_id: str, slot_id: str) -> Booking:
        """
        Reserve a slot for a candidate and charge the booking cost.

        Args:
            candidate_id: Booking candidate
            slot_id: Slot to reserve

        Returns:
            The new Booking in CREATED status

        Raises:
            NotFoundError: slot does not exist
            ConflictError: slot is not AVAILABLE or already has an active booking
            ValidationError: self-booking or slot already started
            ForbiddenError: candidate has a block in effect
            InsufficientBalanceError: candidate cannot afford the booking cost
        """
        with atomic(self.db):
            user_block_service.ensure_not_blocked(self.db, candidate_id, self._now())

            slot = self._lock_slot(slot_id)
            if not slot:
                raise NotFoundError("TimeSlot", slot_id)

            if slot.status != SlotStatus.AVAILABLE or slot.active_booking is not None:
                raise ConflictError("Time slot is not available", code="slot_unavailable")

            if slot.interviewer_id == candidate_id:
                raise ValidationError("Cannot book your own time slot", code="self_booking")

            start_time = as_utc(slot.start_time)
            if start_time <= self._now():
                raise ValidationError("Cannot book a time slot in the past", code="slot_in_past")

            ledger_service.spend(
                self.db,
                candidate_id,
                self.booking_cost,
                f"Interview booking for {start_time.isoformat()}",
            )

            booking = Booking(
                slot_id=slot.id,
                candidate_id=candidate_id,
                points_spent=self.booking_cost,
                status=BookingStatus.CREATED,
            )
            self.db.add(booking)
            slot.status = SlotStatus.BOOKED
            try:
                self.db.flush()
            except IntegrityError as e:
                # Lost a race with another booking on the same slot
                raise ConflictError("Time slot is not available", code="slot_unavailable") from e

            self._notify([candidate_id, slot.interviewer_id], booking.id, NotificationType.CREATION)

        logger.info(
            f"Booking created: id={booking.id}, slot_id={slot_id}, candidate_id={candidate_id}, "
            f"points_spent={self.booking_cost}"
        )
        return booking

    def confirm_booking(self, interviewer_id: str, booking_id: str) -> Booking:
        """
        Interviewer accepts a CREATED booking, materializing an Interview.

        Raises:
            NotFoundError: booking missing or caller is not the slot's interviewer
            ConflictError: booking is not in CREATED status
        """
        with atomic(self.db):
            booking = self._lock_booking(booking_id)
            if not booking or booking.slot.interviewer_id != interviewer_id:
                raise NotFoundError("Booking", booking_id)

            if booking.status != BookingStatus.CREATED:
                raise ConflictError(
                    f"Only new bookings can be confirmed (status is {booking.status.value})",
                    code="invalid_booking_state",
                    status=booking.status.value,
                )

            slot = booking.slot
            start_time, end_time = as_utc(slot.start_time), as_utc(slot.end_time)
            interview = Interview(
                title=f"Interview: {slot.specialization}",
                description=f"Mock interview, specialization {slot.specialization}",
                specialization=slot.specialization,
                interviewer_id=slot.interviewer_id,
                participant_id=booking.candidate_id,
                scheduled_at=start_time,
                duration=int((end_time - start_time).total_seconds() // 60),
                video_link=f"{config.VIDEO_LINK_BASE}/interview-{booking.id}",
                status=InterviewStatus.SCHEDULED,
            )
            self.db.add(interview)
            self.db.flush()

            booking.status = BookingStatus.CONFIRMED
            booking.interview_id = interview.id
            self.db.flush()

            self._notify([booking.candidate_id, interviewer_id], booking.id, NotificationType.CONFIRMATION)

        logger.info(f"Booking confirmed: id={booking_id}, interview_id={interview.id}")
        return booking

    def cancel_booking(
        self,
        candidate_id: str,
        booking_id: str,
        reason: Optional[str] = None,
    ) -> Tuple[Booking, int]:
        """
        Candidate cancels their booking, releasing the slot with a tiered refund.

        Returns:
            Tuple of (cancelled booking, refund amount)

        Raises:
            NotFoundError: booking missing or not owned by the candidate
            ConflictError: booking already CANCELLED or COMPLETED
            ValidationError: the slot has already started
        """
        with atomic(self.db):
            booking = self._lock_booking(booking_id)
            if not booking or booking.candidate_id != candidate_id:
                raise NotFoundError("Booking", booking_id)

            if booking.is_terminal:
                raise ConflictError(
                    f"Booking is already {booking.status.value.lower()}",
                    code="booking_terminal",
                    status=booking.status.value,
                )

            slot = self._lock_slot(booking.slot_id)
            now = self._now()
            start_time = as_utc(slot.start_time)
            if start_time <= now:
                raise ValidationError(
                    "Cannot cancel a booking after the interview has started",
                    code="booking_started",
                )

            refund_amount = compute_refund(
                booking.points_spent,
                start_time,
                now,
                self.refund_hours_threshold,
                self.partial_refund_ratio,
            )

            booking.status = BookingStatus.CANCELLED
            booking.cancel_reason = reason
            slot.status = SlotStatus.AVAILABLE

            interview = booking.interview
            if interview is not None and interview.status == InterviewStatus.SCHEDULED:
                interview.status = InterviewStatus.CANCELLED

            if refund_amount > 0:
                description = "Refund for cancelled booking"
                if reason:
                    description = f"{description}: {reason}"
                ledger_service.refund(self.db, candidate_id, refund_amount, description)

            self.db.flush()
            self._notify([candidate_id, slot.interviewer_id], booking.id, NotificationType.CANCELLATION)

        logger.info(
            f"Booking cancelled: id={booking_id}, candidate_id={candidate_id}, refund={refund_amount}"
        )
        return booking, refund_amount

    def complete_interview(self, interviewer_id: str, interview_id: str) -> Interview:
        """
        Interviewer marks an interview done and earns the reward.

        A linked CONFIRMED booking moves to COMPLETED in the same transaction.

        Raises:
            NotFoundError: interview missing or caller is not its interviewer
            ConflictError: interview already COMPLETED or CANCELLED
        """
        with atomic(self.db):
            interview = self.db.query(Interview).filter(
                Interview.id == interview_id,
                Interview.interviewer_id == interviewer_id,
            ).with_for_update().first()
            if not interview:
                raise NotFoundError("Interview", interview_id)

            if interview.status in (InterviewStatus.COMPLETED, InterviewStatus.CANCELLED):
                raise ConflictError(
                    f"Interview is already {interview.status.value.lower()}",
                    code="invalid_interview_state",
                    status=interview.status.value,
                )

            interview.status = InterviewStatus.COMPLETED

            if self.interviewer_reward > 0:
                ledger_service.earn(
                    self.db,
                    interviewer_id,
                    self.interviewer_reward,
                    f"Conducted interview: {interview.title}",
                )

            booking = interview.booking
            if booking is not None and booking.status == BookingStatus.CONFIRMED:
                booking.status = BookingStatus.COMPLETED

            self.db.flush()

        logger.info(f"Interview completed: id={interview_id}, interviewer_id={interviewer_id}")
        return interview

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_booking(self, user_id: str, booking_id: str) -> Booking:
        """Fetch a booking visible to its candidate or the slot's interviewer."""
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking or user_id not in (booking.candidate_id, booking.slot.interviewer_id):
            raise NotFoundError("Booking", booking_id)
        return booking

    def _filtered(
        self,
        query,
        status: Optional[BookingStatus] = None,
        specialization: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ):
        if status:
            query = query.filter(Booking.status == BookingStatus(status))
        if specialization:
            query = query.filter(TimeSlot.specialization == specialization)
        if start_date:
            query = query.filter(TimeSlot.start_time >= as_utc(start_date))
        if end_date:
            query = query.filter(TimeSlot.start_time <= as_utc(end_date))
        return query.order_by(Booking.created_at.desc()).all()

    def list_candidate_bookings(self, candidate_id: str, **filters) -> List[Booking]:
        query = self.db.query(Booking).join(TimeSlot, Booking.slot_id == TimeSlot.id).filter(
            Booking.candidate_id == candidate_id
        )
        return self._filtered(query, **filters)

    def list_interviewer_bookings(self, interviewer_id: str, **filters) -> List[Booking]:
        query = self.db.query(Booking).join(TimeSlot, Booking.slot_id == TimeSlot.id).filter(
            TimeSlot.interviewer_id == interviewer_id
        )
        return self._filtered(query, **filters)

    def get_interview(self, user_id: str, interview_id: str) -> Interview:
        """Fetch an interview visible to its interviewer or participant."""
        interview = self.db.query(Interview).filter(
            Interview.id == interview_id,
            or_(Interview.interviewer_id == user_id, Interview.participant_id == user_id),
        ).first()
        if not interview:
            raise NotFoundError("Interview", interview_id)
        return interview

    def list_interviews(
        self,
        user_id: str,
        status: Optional[InterviewStatus] = None,
        specialization: Optional[str] = None,
    ) -> List[Interview]:
        """
        Interviews the user conducts or attends, newest first.
        ``specialization`` is a substring match.
        """
        query = self.db.query(Interview).filter(
            or_(Interview.interviewer_id == user_id, Interview.participant_id == user_id)
        )
        if status:
            query = query.filter(Interview.status == InterviewStatus(status))
        if specialization:
            query = query.filter(Interview.specialization.contains(specialization))
        return query.order_by(Interview.created_at.desc()).all()
