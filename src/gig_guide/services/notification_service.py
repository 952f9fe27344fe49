"""
Notification Service - in-app notifications, including venue booking requests
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..db.models import Artist, Organiser, Notification, User, Venue
from ..exceptions import NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)

VENUE_BOOKING = "venue_booking"


class NotificationService:

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, title: str, message: str,
               type: str = "general", data: Optional[Dict[str, Any]] = None) -> Notification:
        if self.db.query(User.id).filter(User.id == user_id).first() is None:
            raise NotFoundError(f"User {user_id} not found")

        notification = Notification(user_id=user_id, type=type, title=title, message=message, data=data)
        self.db.add(notification)
        self.db.commit()
        self.db.refresh(notification)
        logger.info(f"Notification {notification.id} ({type}) created for user {user_id}")
        return notification

    def venue_owner_user_id(self, venue: Venue) -> int:
        """The account behind a venue's owner profile"""
        if venue.owner_type == "artist":
            owner = self.db.query(Artist).filter(Artist.id == venue.owner_id).first()
        elif venue.owner_type == "organiser":
            owner = self.db.query(Organiser).filter(Organiser.id == venue.owner_id).first()
        else:
            owner = None

        if owner is None:
            raise NotFoundError(f"Venue {venue.id} has no owner to notify")
        return owner.user_id

    def venue_booking_request(self, sender: User, venue_id: int, message: str,
                              event_date: Optional[str] = None,
                              details: Optional[Dict[str, Any]] = None) -> Notification:
        venue = self.db.query(Venue).filter(Venue.id == venue_id).first()
        if venue is None:
            raise NotFoundError(f"Venue {venue_id} not found")

        recipient_id = self.venue_owner_user_id(venue)
        sender_name = sender.username or sender.email
        # Sender fields come from the authenticated account, never from details
        data = {
            **(details or {}),
            "venue_id": venue.id,
            "sender_id": sender.id,
            "sender_email": sender.email,
            "event_date": event_date,
        }

        return self.create(
            user_id=recipient_id,
            type=VENUE_BOOKING,
            title=f"Booking request for {venue.name}",
            message=f"{sender_name}: {message}",
            data=data,
        )

    def list_for_user(self, user_id: int, unread_only: bool = False) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    def mark_read(self, user_id: int, notification_id: int) -> Notification:
        notification = self.db.query(Notification).filter(Notification.id == notification_id).first()
        if notification is None:
            raise NotFoundError(f"Notification {notification_id} not found")
        if notification.user_id != user_id:
            raise PermissionDeniedError("You can only mark your own notifications as read")

        notification.is_read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification
