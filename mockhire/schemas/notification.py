from datetime import datetime
from typing import Optional

from mockhire.db.models.booking_notification import NotificationType
from mockhire.schemas._base import ORMResponse


class NotificationResponse(ORMResponse):
    id: str
    booking_id: str
    type: NotificationType
    is_read: bool
    created_at: Optional[datetime] = None
