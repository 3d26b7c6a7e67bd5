"""
Notification Routes

GET /notifications - Latest notifications (newest first) + unread count
GET /notifications/unread-count - Unread badge figure
POST /notifications/read-all - Mark all as read
POST /notifications/{notification_id}/read - Mark one as read
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from admissions_portal.core.auth import get_current_user
from admissions_portal.models import Notification
from admissions_portal.services import PortalServices, get_services
from admissions_portal.schemas.schemas import MessageResponse, NotificationListResponse, UnreadCountResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    limit: Optional[int] = Query(None, ge=1, le=100),
    user: dict = Depends(get_current_user),
    services: PortalServices = Depends(get_services),
):
    notifications = services.notifications.list(user["user_id"], limit)
    return NotificationListResponse(
        notifications=notifications,
        unread_count=services.notifications.unread_count(user["user_id"]),
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(user: dict = Depends(get_current_user), services: PortalServices = Depends(get_services)):
    return UnreadCountResponse(unread_count=services.notifications.unread_count(user["user_id"]))


@router.post("/read-all", response_model=MessageResponse)
def mark_all_read(user: dict = Depends(get_current_user), services: PortalServices = Depends(get_services)):
    changed = services.notifications.mark_all_read(user["user_id"])
    return MessageResponse(message=f"{changed} notification(s) marked as read")


@router.post("/{notification_id}/read", response_model=Notification)
def mark_read(
    notification_id: str,
    user: dict = Depends(get_current_user),
    services: PortalServices = Depends(get_services),
):
    """Mark as read. Already-read notifications are returned unchanged."""
    return services.notifications.mark_read(notification_id, user["user_id"])
