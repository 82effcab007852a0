"""
Pydantic schemas for admin user blocking.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from mockhire.schemas._base import ORMResponse


class UserBlockCreate(BaseModel):
    """Permanent blocks omit end_date; temporary blocks require one in the future."""
    user_id: str
    reason: str = Field(..., min_length=1, max_length=500)
    is_permanent: bool = False
    end_date: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "c3d4...",
                "reason": "Repeated no-shows",
                "is_permanent": False,
                "end_date": "2026-12-01T00:00:00Z"
            }
        }


class UserBlockResponse(ORMResponse):
    id: str
    user_id: str
    reason: str
    is_permanent: bool
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool
    created_at: Optional[datetime] = None


class UserBlockListResponse(BaseModel):
    blocks: List[UserBlockResponse]
    page: int
    page_size: int
    total: int
