"""
Interview model, materialized when an interviewer confirms a booking.

Slot fields are copied at confirmation time and never re-synced.
"""
import enum
import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mockhire.core.timeutils import utcnow
from mockhire.db.base import Base


class InterviewStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    specialization = Column(String, nullable=False)
    interviewer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    participant_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    duration = Column(Integer, nullable=False, default=60)  # minutes
    video_link = Column(String, nullable=True)
    status = Column(Enum(InterviewStatus, name="interview_status"), nullable=False, default=InterviewStatus.SCHEDULED)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    booking = relationship("Booking", back_populates="interview", uselist=False)

    def __repr__(self):
        return f"<Interview(id={self.id}, status={self.status}, scheduled_at={self.scheduled_at})>"
