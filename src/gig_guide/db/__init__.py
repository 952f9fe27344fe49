"""
Database package for Gig Guide
"""
from .engine import engine, SessionLocal, get_db, init_db, test_connection
from .base import Base
from .models import (
    User,
    Artist,
    Organiser,
    Venue,
    Event,
    EventArtist,
    PaidFeature,
    PurchasedFeature,
    Favorite,
    Rating,
    Notification,
)

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "init_db",
    "test_connection",
    "Base",
    "User",
    "Artist",
    "Organiser",
    "Venue",
    "Event",
    "EventArtist",
    "PaidFeature",
    "PurchasedFeature",
    "Favorite",
    "Rating",
    "Notification",
]
