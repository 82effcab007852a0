"""
Pydantic schemas for booking and interview endpoints.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from mockhire.db.models.booking import BookingStatus
from mockhire.db.models.interview import InterviewStatus
from mockhire.schemas._base import ORMResponse
from mockhire.schemas.timeslot import TimeSlotResponse


class BookingCreate(BaseModel):
    slot_id: str = Field(..., description="Time slot to book")


class BookingCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500, description="Optional cancellation reason")


class BookingResponse(ORMResponse):
    id: str
    slot_id: str
    candidate_id: str
    points_spent: int
    status: BookingStatus
    interview_id: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    slot: Optional[TimeSlotResponse] = None


class BookingCancelResponse(BaseModel):
    """Response for a cancellation, including the refund actually granted."""
    booking: BookingResponse
    refund_amount: int = Field(..., description="Points returned to the candidate")
    message: str

    class Config:
        json_schema_extra = {
            "example": {
                "booking": {
                    "id": "5f0c...",
                    "slot_id": "a1b2...",
                    "candidate_id": "c3d4...",
                    "points_spent": 10,
                    "status": "CANCELLED",
                    "interview_id": None,
                    "cancel_reason": "Schedule conflict"
                },
                "refund_amount": 5,
                "message": "Booking cancelled. Points refunded: 5"
            }
        }


class InterviewResponse(ORMResponse):
    id: str
    title: str
    description: Optional[str] = None
    specialization: str
    interviewer_id: str
    participant_id: Optional[str] = None
    scheduled_at: datetime
    duration: int
    video_link: Optional[str] = None
    status: InterviewStatus
