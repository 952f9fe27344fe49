"""
Notification API routes
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .auth import get_current_user
from .db import get_db, User
from .exceptions import PermissionDeniedError
from .schemas import NotificationCreate, VenueBookingRequest
from .serializers import notification_to_dict
from .services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = dict(payload.data or {})
    data["sender_id"] = current_user.id
    notification = NotificationService(db).create(
        user_id=payload.user_id,
        title=payload.title,
        message=payload.message,
        type=payload.type,
        data=data,
    )
    return notification_to_dict(notification)


@router.post("/venue-booking", status_code=status.HTTP_201_CREATED)
def request_venue_booking(
    payload: VenueBookingRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Notify the account that owns a venue about a booking request"""
    notification = NotificationService(db).venue_booking_request(
        current_user,
        payload.venue_id,
        payload.message,
        event_date=payload.event_date,
        details=payload.details,
    )
    return {"message": "Booking request sent", "notification": notification_to_dict(notification)}


@router.get("/user/{user_id}")
def list_user_notifications(
    user_id: int,
    unread_only: bool = False,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if user_id != current_user.id and not current_user.is_admin:
        raise PermissionDeniedError("You can only view your own notifications")
    notifications = NotificationService(db).list_for_user(user_id, unread_only=unread_only)
    return [notification_to_dict(n) for n in notifications]


@router.put("/{notification_id}/read")
def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification = NotificationService(db).mark_read(current_user.id, notification_id)
    return notification_to_dict(notification)
