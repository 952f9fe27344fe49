"""
Database models for Gig Guide
"""
from .user import User, UserRole, ROLE_ACL_IDS, ADMIN_ROLES
from .artist import Artist, Organiser
from .venue import Venue, VenueOwnerType
from .event import Event, EventArtist, EventOwnerType
from .feature import (
    PaidFeature,
    PurchasedFeature,
    PurchasedFeatureStatus,
    FeatureTarget,
    FeatureOwnerType,
    BillingType,
)
from .engagement import Favorite, Rating, Notification, ItemType

__all__ = [
    "User",
    "UserRole",
    "ROLE_ACL_IDS",
    "ADMIN_ROLES",
    "Artist",
    "Organiser",
    "Venue",
    "VenueOwnerType",
    "Event",
    "EventArtist",
    "EventOwnerType",
    "PaidFeature",
    "PurchasedFeature",
    "PurchasedFeatureStatus",
    "FeatureTarget",
    "FeatureOwnerType",
    "BillingType",
    "Favorite",
    "Rating",
    "Notification",
    "ItemType",
]
