"""
Interview endpoints. Interviews are created by confirming a booking; here
they are read and completed.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from mockhire.api.routes.bookings import get_booking_service
from mockhire.core.auth_dependency import CurrentUser, get_current_user
from mockhire.db.models.interview import InterviewStatus
from mockhire.schemas.booking import InterviewResponse
from mockhire.services.booking_service import BookingService

router = APIRouter(prefix="/interviews", tags=["Interviews"])


@router.get("", response_model=List[InterviewResponse])
def list_interviews(
    interview_status: Optional[InterviewStatus] = Query(None, alias="status"),
    specialization: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Interviews the caller conducts or attends, newest first."""
    return service.list_interviews(current_user.id, status=interview_status, specialization=specialization)


@router.get("/{interview_id}", response_model=InterviewResponse)
def get_interview(
    interview_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_interview(current_user.id, interview_id)


@router.post("/{interview_id}/complete", response_model=InterviewResponse)
def complete_interview(
    interview_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Mark an interview done; the interviewer is rewarded with points."""
    return service.complete_interview(current_user.id, interview_id)
