"""
Booking endpoints. Every state change delegates to BookingService, which
owns the transaction boundary.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from mockhire.core.auth_dependency import CurrentUser, get_current_user
from mockhire.db.models.booking import BookingStatus
from mockhire.db.session import get_db
from mockhire.schemas.booking import BookingCancel, BookingCancelResponse, BookingCreate, BookingResponse
from mockhire.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


@router.get("", response_model=List[BookingResponse])
def list_my_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    specialization: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings made by the caller as a candidate, newest first."""
    return service.list_candidate_bookings(
        current_user.id,
        status=booking_status,
        specialization=specialization,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/interviewer", response_model=List[BookingResponse])
def list_interviewer_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    specialization: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings against the caller's slots, newest first."""
    return service.list_interviewer_bookings(
        current_user.id,
        status=booking_status,
        specialization=specialization,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_booking(current_user.id, booking_id)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    request: BookingCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.create_booking(current_user.id, request.slot_id)


@router.patch("/{booking_id}/confirm", response_model=BookingResponse)
def confirm_booking(
    booking_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.confirm_booking(current_user.id, booking_id)


@router.patch("/{booking_id}/cancel", response_model=BookingCancelResponse)
def cancel_booking(
    booking_id: str,
    request: Optional[BookingCancel] = Body(None),
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    reason = request.reason if request else None
    booking, refund_amount = service.cancel_booking(current_user.id, booking_id, reason)
    return BookingCancelResponse(
        booking=BookingResponse.model_validate(booking),
        refund_amount=refund_amount,
        message=f"Booking cancelled. Points refunded: {refund_amount}",
    )
