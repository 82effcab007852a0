"""
Time slot endpoints: interviewers publish availability, everyone browses it.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mockhire.core.auth_dependency import CurrentUser, get_current_user, require_roles
from mockhire.db.models.time_slot import SlotStatus
from mockhire.db.models.user import UserRole
from mockhire.db.session import atomic, get_db
from mockhire.schemas.timeslot import TimeSlotCreate, TimeSlotResponse, TimeSlotUpdate
from mockhire.services import timeslot_service

router = APIRouter(prefix="/timeslots", tags=["Time Slots"])

require_interviewer = require_roles(UserRole.INTERVIEWER, UserRole.ADMIN)


@router.get("", response_model=List[TimeSlotResponse], dependencies=[Depends(get_current_user)])
def list_time_slots(
    specialization: Optional[str] = None,
    slot_status: Optional[SlotStatus] = Query(None, alias="status"),
    interviewer_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    include_past: bool = False,
    db: Session = Depends(get_db),
):
    """List slots; without a date range only future slots are returned unless include_past=true."""
    return timeslot_service.list_slots(
        db,
        specialization=specialization,
        status=slot_status,
        interviewer_id=interviewer_id,
        start_date=start_date,
        end_date=end_date,
        include_past=include_past,
    )


@router.get("/{slot_id}", response_model=TimeSlotResponse)
def get_time_slot(
    slot_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return timeslot_service.get_slot(db, slot_id, current_user.id, is_admin=current_user.is_admin)


@router.post("", response_model=TimeSlotResponse, status_code=status.HTTP_201_CREATED)
def create_time_slot(
    request: TimeSlotCreate,
    current_user: CurrentUser = Depends(require_interviewer),
    db: Session = Depends(get_db),
):
    with atomic(db):
        slot = timeslot_service.create_slot(
            db,
            current_user.id,
            request.start_time,
            request.end_time,
            request.specialization,
        )
    return slot


@router.patch("/{slot_id}", response_model=TimeSlotResponse)
def update_time_slot(
    slot_id: str,
    request: TimeSlotUpdate,
    current_user: CurrentUser = Depends(require_interviewer),
    db: Session = Depends(get_db),
):
    with atomic(db):
        slot = timeslot_service.update_slot(
            db,
            slot_id,
            current_user.id,
            request.model_dump(exclude_unset=True),
            is_admin=current_user.is_admin,
        )
    return slot


@router.delete("/{slot_id}")
def delete_time_slot(
    slot_id: str,
    current_user: CurrentUser = Depends(require_interviewer),
    db: Session = Depends(get_db),
):
    with atomic(db):
        timeslot_service.delete_slot(db, slot_id, current_user.id, is_admin=current_user.is_admin)
    return {"message": "Time slot deleted"}
