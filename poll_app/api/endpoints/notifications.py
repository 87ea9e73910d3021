from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from poll_app.db.database import get_db
from poll_app.models.user import User
from poll_app.schemas.notification import NotificationRead, UnreadCount, MessageResponse
from poll_app.api.endpoints.dependencies import get_current_user
from poll_app.api.responses import AUTH_ERROR_RESPONSE, get_notification_responses
from poll_app.services import notifications

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationRead], responses={401: AUTH_ERROR_RESPONSE})
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """The caller's most recent notifications, newest first."""
    return notifications.list_notifications(db, current_user)


@router.get("/unread-count", response_model=UnreadCount, responses={401: AUTH_ERROR_RESPONSE})
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return UnreadCount(count=notifications.count_unread(db, current_user))


@router.put("/read-all", response_model=MessageResponse, responses={401: AUTH_ERROR_RESPONSE})
@router.post("/mark-all-read", response_model=MessageResponse, responses={401: AUTH_ERROR_RESPONSE})
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notifications.mark_all_read(db, current_user)
    return MessageResponse(message="All notifications marked as read")


@router.put("/{notification_id}/read", response_model=MessageResponse, responses=get_notification_responses())
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notifications.mark_read(db, current_user, notification_id)
    return MessageResponse(message="Notification marked as read")
