"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from mockhire.db.models.user import User, UserRole
from mockhire.db.models.time_slot import TimeSlot, SlotStatus
from mockhire.db.models.booking import Booking, BookingStatus, TERMINAL_BOOKING_STATUSES
from mockhire.db.models.points_transaction import PointsTransaction, TransactionType
from mockhire.db.models.interview import Interview, InterviewStatus
from mockhire.db.models.booking_notification import BookingNotification, NotificationType
from mockhire.db.models.user_block import UserBlock

# Explicitly export all models for clarity
__all__ = [
    "User",
    "UserRole",
    "TimeSlot",
    "SlotStatus",
    "Booking",
    "BookingStatus",
    "TERMINAL_BOOKING_STATUSES",
    "PointsTransaction",
    "TransactionType",
    "Interview",
    "InterviewStatus",
    "BookingNotification",
    "NotificationType",
    "UserBlock",
]
