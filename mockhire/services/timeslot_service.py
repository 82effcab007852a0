"""
TimeSlot registry.

Owns interviewer availability windows: creation with overlap rejection,
updates gated by booking state, deletion, and filtered listing.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from mockhire.core.exceptions import ConflictError, NotFoundError, ValidationError
from mockhire.core.timeutils import as_utc, utcnow
from mockhire.db.models.time_slot import TimeSlot, SlotStatus
from mockhire.db.models.user import User

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("start_time", "end_time", "specialization", "status")
PATCHABLE_STATUSES = (SlotStatus.AVAILABLE, SlotStatus.CANCELLED)


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open intervals [a_start, a_end) and [b_start, b_end) intersect."""
    return a_start < b_end and b_start < a_end


def _validate_range(start_time: datetime, end_time: datetime) -> None:
    if end_time <= start_time:
        raise ValidationError(
            "End time must be later than start time",
            code="invalid_time_range",
        )


def _validate_specialization(specialization: Optional[str]) -> str:
    if specialization is None or not specialization.strip():
        raise ValidationError("Specialization is required", code="invalid_specialization")
    return specialization.strip()


def _lock_interviewer(db: Session, interviewer_id: str) -> None:
    # Serializes slot writes per interviewer so two overlapping creates cannot both pass
    user = db.query(User).filter(User.id == interviewer_id).with_for_update().first()
    if not user:
        raise NotFoundError("User", interviewer_id)


def find_overlapping_slot(
    db: Session,
    interviewer_id: str,
    start_time: datetime,
    end_time: datetime,
    exclude_slot_id: Optional[str] = None,
) -> Optional[TimeSlot]:
    """
    Find a non-cancelled slot of the interviewer intersecting [start_time, end_time).

    Back-to-back slots (one ending exactly when the other starts) do not overlap.
    """
    query = db.query(TimeSlot).filter(
        TimeSlot.interviewer_id == interviewer_id,
        TimeSlot.status != SlotStatus.CANCELLED,
        TimeSlot.start_time < as_utc(end_time),
        TimeSlot.end_time > as_utc(start_time),
    )
    if exclude_slot_id:
        query = query.filter(TimeSlot.id != exclude_slot_id)
    return query.first()


def _get_owned_slot(db: Session, slot_id: str, interviewer_id: str, is_admin: bool, lock: bool = False) -> TimeSlot:
    query = db.query(TimeSlot).filter(TimeSlot.id == slot_id)
    if not is_admin:
        query = query.filter(TimeSlot.interviewer_id == interviewer_id)
    if lock:
        query = query.with_for_update()
    slot = query.first()
    if not slot:
        raise NotFoundError("TimeSlot", slot_id)
    return slot


def create_slot(
    db: Session,
    interviewer_id: str,
    start_time: datetime,
    end_time: datetime,
    specialization: str,
) -> TimeSlot:
    """
    Create an AVAILABLE slot for an interviewer.

    Args:
        db: Database session
        interviewer_id: Owner of the slot
        start_time: Window start (naive values are taken as UTC)
        end_time: Window end, exclusive
        specialization: Free-text category

    Returns:
        The new TimeSlot (flushed, not committed)

    Raises:
        ValidationError: end_time <= start_time or empty specialization
        ConflictError: overlaps another non-cancelled slot of the interviewer
    """
    start_time, end_time = as_utc(start_time), as_utc(end_time)
    _validate_range(start_time, end_time)
    specialization = _validate_specialization(specialization)

    _lock_interviewer(db, interviewer_id)
    conflicting = find_overlapping_slot(db, interviewer_id, start_time, end_time)
    if conflicting:
        logger.warning(
            f"Slot overlap rejected: interviewer_id={interviewer_id}, conflicting_slot_id={conflicting.id}"
        )
        raise ConflictError(
            "Time slot overlaps an existing slot",
            code="slot_overlap",
            conflicting_slot_id=conflicting.id,
        )

    slot = TimeSlot(
        interviewer_id=interviewer_id,
        start_time=start_time,
        end_time=end_time,
        specialization=specialization,
        status=SlotStatus.AVAILABLE,
    )
    db.add(slot)
    db.flush()

    logger.info(f"Time slot created: id={slot.id}, interviewer_id={interviewer_id}, start={start_time.isoformat()}")
    return slot


def update_slot(
    db: Session,
    slot_id: str,
    interviewer_id: str,
    patch: Dict[str, Any],
    is_admin: bool = False,
) -> TimeSlot:
    """
    Apply a partial update to a slot.

    Time fields and status cannot change while an active booking holds the
    slot. Changing specialization never touches an already materialized
    Interview, which is a snapshot taken at confirmation.
    """
    slot = _get_owned_slot(db, slot_id, interviewer_id, is_admin, lock=True)
    changes = {key: value for key, value in patch.items() if key in UPDATABLE_FIELDS and value is not None}

    time_changed = "start_time" in changes or "end_time" in changes
    if (time_changed or "status" in changes) and slot.active_booking is not None:
        raise ConflictError(
            "Cannot change time or status of a booked slot",
            code="slot_booked",
        )

    reactivated = False
    if "status" in changes:
        new_status = SlotStatus(changes["status"])
        if new_status not in PATCHABLE_STATUSES:
            raise ValidationError(
                f"Slot status can only be set to {', '.join(s.value for s in PATCHABLE_STATUSES)}",
                code="invalid_slot_status",
            )
        reactivated = slot.status == SlotStatus.CANCELLED and new_status == SlotStatus.AVAILABLE
        slot.status = new_status

    if "specialization" in changes:
        slot.specialization = _validate_specialization(changes["specialization"])

    if time_changed or reactivated:
        new_start = as_utc(changes.get("start_time")) or as_utc(slot.start_time)
        new_end = as_utc(changes.get("end_time")) or as_utc(slot.end_time)
        _validate_range(new_start, new_end)

        if slot.status != SlotStatus.CANCELLED:
            _lock_interviewer(db, slot.interviewer_id)
            conflicting = find_overlapping_slot(
                db, slot.interviewer_id, new_start, new_end, exclude_slot_id=slot.id
            )
            if conflicting:
                raise ConflictError(
                    "Time slot overlaps an existing slot",
                    code="slot_overlap",
                    conflicting_slot_id=conflicting.id,
                )

        slot.start_time = new_start
        slot.end_time = new_end

    db.flush()
    logger.info(f"Time slot updated: id={slot.id}, fields={sorted(changes)}")
    return slot


def delete_slot(db: Session, slot_id: str, interviewer_id: str, is_admin: bool = False) -> None:
    """Delete a slot that has no active booking. Cancelled booking records go with it."""
    slot = _get_owned_slot(db, slot_id, interviewer_id, is_admin, lock=True)

    if slot.active_booking is not None:
        raise ConflictError("Cannot delete a booked slot", code="slot_booked")

    db.delete(slot)
    db.flush()
    logger.info(f"Time slot deleted: id={slot_id}, by={interviewer_id}")


def get_slot(db: Session, slot_id: str, viewer_id: str, is_admin: bool = False) -> TimeSlot:
    """Fetch a slot visible to its owner, its booking candidate, or an admin."""
    slot = db.query(TimeSlot).filter(TimeSlot.id == slot_id).first()
    if not slot:
        raise NotFoundError("TimeSlot", slot_id)

    booking = slot.active_booking
    visible = (
        is_admin
        or slot.interviewer_id == viewer_id
        or (booking is not None and booking.candidate_id == viewer_id)
    )
    if not visible:
        raise NotFoundError("TimeSlot", slot_id)
    return slot


def list_slots(
    db: Session,
    specialization: Optional[str] = None,
    status: Optional[SlotStatus] = None,
    interviewer_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    include_past: bool = False,
    now: Optional[datetime] = None,
) -> List[TimeSlot]:
    """
    List slots matching the filters, ordered by start time.

    When no date range is given, only future slots are returned unless
    ``include_past`` is set.
    """
    query = db.query(TimeSlot)

    if specialization:
        query = query.filter(TimeSlot.specialization == specialization)
    if status:
        query = query.filter(TimeSlot.status == SlotStatus(status))
    if interviewer_id:
        query = query.filter(TimeSlot.interviewer_id == interviewer_id)

    if start_date or end_date:
        if start_date:
            query = query.filter(TimeSlot.start_time >= as_utc(start_date))
        if end_date:
            query = query.filter(TimeSlot.start_time <= as_utc(end_date))
    elif not include_past:
        query = query.filter(TimeSlot.start_time >= as_utc(now or utcnow()))

    return query.order_by(TimeSlot.start_time.asc()).all()
