import enum
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Boolean, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mockhire.core.timeutils import utcnow
from mockhire.db.base import Base


class NotificationType(str, enum.Enum):
    CREATION = "CREATION"
    CONFIRMATION = "CONFIRMATION"
    CANCELLATION = "CANCELLATION"
    REMINDER = "REMINDER"


class BookingNotification(Base):
    __tablename__ = "booking_notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)
    type = Column(Enum(NotificationType, name="notification_type"), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    booking = relationship("Booking", back_populates="notifications")

    __table_args__ = (
        Index("idx_notification_user_read", "user_id", "is_read"),
    )
