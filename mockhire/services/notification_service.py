"""
Booking notifications.

The booking lifecycle fans out state changes through a NotificationSink.
Delivery is fire-and-forget: a failing notification is logged and never
rolls back the booking transaction that produced it.
"""
import logging
from typing import List, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mockhire.core.exceptions import NotFoundError
from mockhire.db.models.booking_notification import BookingNotification, NotificationType

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def notify(self, db: Session, user_id: str, booking_id: str, notification_type: NotificationType) -> None:
        ...


class BookingNotificationSink:
    """Persists notifications as BookingNotification rows."""

    def notify(self, db: Session, user_id: str, booking_id: str, notification_type: NotificationType) -> None:
        # SAVEPOINT: a failed insert only discards this notification
        try:
            with db.begin_nested():
                db.add(BookingNotification(
                    user_id=user_id,
                    booking_id=booking_id,
                    type=notification_type,
                ))
        except SQLAlchemyError as e:
            logger.warning(
                f"Notification dropped: user_id={user_id}, booking_id={booking_id}, "
                f"type={notification_type.value}, error={e}"
            )
            return

        logger.debug(f"Notification queued: user_id={user_id}, booking_id={booking_id}, type={notification_type.value}")


def list_notifications(db: Session, user_id: str, unread_only: bool = False) -> List[BookingNotification]:
    query = db.query(BookingNotification).filter(BookingNotification.user_id == user_id)
    if unread_only:
        query = query.filter(BookingNotification.is_read.is_(False))
    return query.order_by(BookingNotification.created_at.desc()).all()


def mark_notification_read(db: Session, user_id: str, notification_id: str) -> BookingNotification:
    notification = db.query(BookingNotification).filter(
        BookingNotification.id == notification_id,
        BookingNotification.user_id == user_id,
    ).first()
    if not notification:
        raise NotFoundError("Notification", notification_id)

    notification.is_read = True
    db.flush()
    return notification
