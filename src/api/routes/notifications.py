from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.api.auth.auth import get_authenticated_user_id, scope_user
from src.api.database.database import get_db
from src.api.services.support_service import NotificationStore
from src.models.support_schemas import NotificationResponse, NotificationsResponse

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def get_notification_store(db: Session = Depends(get_db)) -> NotificationStore:
    return NotificationStore(db)


@router.get("", response_model=NotificationsResponse)
def get_notifications(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: NotificationStore = Depends(get_notification_store),
):
    owner = scope_user(auth_user_id, user_id)
    notifications = store.list_for_user(owner)
    return {
        "notifications": notifications,
        "unread": sum(1 for n in notifications if not n.read),
    }


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: int,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: NotificationStore = Depends(get_notification_store),
):
    owner = scope_user(auth_user_id, user_id)
    return store.mark_read(owner, notification_id)
