"""
Pydantic schemas for points endpoints.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from mockhire.db.models.points_transaction import TransactionType
from mockhire.schemas._base import ORMResponse


class BalanceResponse(BaseModel):
    balance: int = Field(..., description="Balance folded over the full transaction history")


class TransactionResponse(ORMResponse):
    id: str
    amount: int
    type: TransactionType
    description: str
    created_at: Optional[datetime] = None


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]
    page: int
    page_size: int


class PointsAdjustRequest(BaseModel):
    """Admin points grant or deduction."""
    amount: int = Field(..., gt=0, description="Positive number of points")
    description: str = Field(..., min_length=1, max_length=300)

    class Config:
        json_schema_extra = {
            "example": {
                "amount": 50,
                "description": "Welcome bonus"
            }
        }
