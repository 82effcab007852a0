from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mockhire.core.auth_dependency import CurrentUser, get_current_user
from mockhire.db.session import atomic, get_db
from mockhire.schemas.notification import NotificationResponse
from mockhire.services import notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
def list_notifications(
    unread_only: bool = False,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return notification_service.list_notifications(db, current_user.id, unread_only=unread_only)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with atomic(db):
        notification = notification_service.mark_notification_read(db, current_user.id, notification_id)
    return notification
