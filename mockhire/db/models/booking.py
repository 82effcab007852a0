"""
Booking model: a candidate's point-backed claim on a time slot.
"""
import enum
import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, Index, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mockhire.core.timeutils import utcnow
from mockhire.db.base import Base


class BookingStatus(str, enum.Enum):
    CREATED = "CREATED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


TERMINAL_BOOKING_STATUSES = (BookingStatus.CANCELLED, BookingStatus.COMPLETED)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    slot_id = Column(String(36), ForeignKey("time_slots.id"), nullable=False, index=True)
    candidate_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    points_spent = Column(Integer, nullable=False)  # fixed at creation, basis for refunds
    status = Column(Enum(BookingStatus, name="booking_status"), nullable=False, default=BookingStatus.CREATED, index=True)
    interview_id = Column(String(36), ForeignKey("interviews.id"), nullable=True, unique=True)
    cancel_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    slot = relationship("TimeSlot", back_populates="bookings")
    candidate = relationship("User", backref="bookings")
    interview = relationship("Interview", back_populates="booking")
    notifications = relationship(
        "BookingNotification",
        back_populates="booking",
        cascade="all, delete-orphan",
    )

    # One non-cancelled booking per slot
    __table_args__ = (
        Index(
            "uq_bookings_active_slot",
            "slot_id",
            unique=True,
            postgresql_where=text("status <> 'CANCELLED'"),
            sqlite_where=text("status <> 'CANCELLED'"),
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_BOOKING_STATUSES

    def __repr__(self):
        return f"<Booking(id={self.id}, slot_id={self.slot_id}, status={self.status})>"
