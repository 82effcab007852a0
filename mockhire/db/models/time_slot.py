"""
TimeSlot model: an interviewer's offered availability window.
"""
import enum
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Index, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mockhire.core.timeutils import utcnow
from mockhire.db.base import Base


class SlotStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    CANCELLED = "CANCELLED"


class TimeSlot(Base):
    """
    Availability window owned by an interviewer.

    ``status`` is the single source of truth for bookability: BOOKED while a
    non-cancelled booking holds the slot, AVAILABLE otherwise.
    """
    __tablename__ = "time_slots"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    interviewer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)
    specialization = Column(String, nullable=False, index=True)
    status = Column(Enum(SlotStatus, name="slot_status"), nullable=False, default=SlotStatus.AVAILABLE, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    interviewer = relationship("User", backref="time_slots")
    bookings = relationship(
        "Booking",
        back_populates="slot",
        cascade="all, delete-orphan",
        order_by="Booking.created_at",
    )

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="check_slot_time_range"),
        Index("idx_slot_interviewer_range", "interviewer_id", "start_time", "end_time"),
    )

    @property
    def active_booking(self):
        """The booking currently holding this slot, if any."""
        for booking in self.bookings:
            if booking.is_active:
                return booking
        return None

    def __repr__(self):
        return f"<TimeSlot(id={self.id}, interviewer_id={self.interviewer_id}, status={self.status})>"
