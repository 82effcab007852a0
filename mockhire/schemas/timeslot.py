"""
Pydantic schemas for time slot endpoints.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from mockhire.db.models.time_slot import SlotStatus
from mockhire.schemas._base import ORMResponse


class TimeSlotCreate(BaseModel):
    """Request schema for publishing an availability window."""
    start_time: datetime = Field(..., description="Window start (ISO 8601, UTC if no offset)")
    end_time: datetime = Field(..., description="Window end, exclusive")
    specialization: str = Field(..., min_length=2, description="Interview category, matched exactly when filtering")

    class Config:
        json_schema_extra = {
            "example": {
                "start_time": "2026-11-02T10:00:00Z",
                "end_time": "2026-11-02T11:00:00Z",
                "specialization": "Backend"
            }
        }


class TimeSlotUpdate(BaseModel):
    """Partial update; time fields and status are locked while booked."""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    specialization: Optional[str] = Field(None, min_length=2)
    status: Optional[SlotStatus] = Field(None, description="AVAILABLE or CANCELLED")


class TimeSlotResponse(ORMResponse):
    id: str
    interviewer_id: str
    start_time: datetime
    end_time: datetime
    specialization: str
    status: SlotStatus
    created_at: Optional[datetime] = None
