"""
Response builders shared by the routers

Every stored media path goes through normalize_media_url here, and every
owned resource carries server-computed is_owner / can_edit flags.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .db.models import (
    Artist, Event, Favorite, Notification, Organiser, PaidFeature, PurchasedFeature, Rating, User, Venue
)
from .services.media_paths import gallery_urls, normalize_media_url
from .services.ownership import Principal, can_modify, owns


def _money(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _ownership_flags(resource: Any, principal: Optional[Principal]) -> Dict[str, bool]:
    return {
        "is_owner": owns(principal, resource),
        "can_edit": can_modify(principal, resource),
    }


def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "profile_picture": normalize_media_url(user.profile_picture),
        "email_verified": user.email_verified,
        "is_active": user.is_active,
        "artist_id": user.artist.id if user.artist else None,
        "organiser_id": user.organiser.id if user.organiser else None,
    }


def artist_to_dict(artist: Artist, principal: Optional[Principal] = None,
                   features: Optional[List[str]] = None) -> Dict[str, Any]:
    data = {
        "id": artist.id,
        "user_id": artist.user_id,
        "stage_name": artist.stage_name,
        "real_name": artist.real_name,
        "genre": artist.genre,
        "bio": artist.bio,
        "phone_number": artist.phone_number,
        "instagram": artist.instagram,
        "facebook": artist.facebook,
        "twitter": artist.twitter,
        "profile_picture": normalize_media_url(artist.profile_picture),
        "gallery": gallery_urls(artist.gallery),
        "created_at": _iso(artist.created_at),
        "updated_at": _iso(artist.updated_at),
    }
    data.update(_ownership_flags(artist, principal))
    if features is not None:
        data["features"] = features
    return data


def organiser_to_dict(organiser: Organiser, principal: Optional[Principal] = None) -> Dict[str, Any]:
    data = {
        "id": organiser.id,
        "user_id": organiser.user_id,
        "name": organiser.name,
        "contact_email": organiser.contact_email,
        "phone_number": organiser.phone_number,
        "website": organiser.website,
        "description": organiser.description,
        "profile_picture": normalize_media_url(organiser.profile_picture),
        "gallery": gallery_urls(organiser.gallery),
        "created_at": _iso(organiser.created_at),
    }
    data.update(_ownership_flags(organiser, principal))
    return data


def venue_to_dict(venue: Venue, principal: Optional[Principal] = None,
                  features: Optional[List[str]] = None) -> Dict[str, Any]:
    data = {
        "id": venue.id,
        "name": venue.name,
        "location": venue.location,
        "capacity": venue.capacity,
        "contact_email": venue.contact_email,
        "phone_number": venue.phone_number,
        "website": venue.website,
        "address": venue.address,
        "latitude": venue.latitude,
        "longitude": venue.longitude,
        "user_id": venue.user_id,
        "owner_type": venue.owner_type,
        "owner_id": venue.owner_id,
        "main_picture": normalize_media_url(venue.main_picture),
        "venue_gallery": gallery_urls(venue.venue_gallery),
        "created_at": _iso(venue.created_at),
    }
    data.update(_ownership_flags(venue, principal))
    if features is not None:
        data["features"] = features
    return data


def venue_summary(venue: Optional[Venue]) -> Optional[Dict[str, Any]]:
    if venue is None:
        return None
    return {
        "id": venue.id,
        "name": venue.name,
        "location": venue.location,
        "address": venue.address,
        "main_picture": normalize_media_url(venue.main_picture),
    }


def artist_summary(artist: Artist) -> Dict[str, Any]:
    return {
        "id": artist.id,
        "stage_name": artist.stage_name,
        "genre": artist.genre,
        "profile_picture": normalize_media_url(artist.profile_picture),
    }


def event_to_dict(event: Event, principal: Optional[Principal] = None,
                  features: Optional[List[str]] = None) -> Dict[str, Any]:
    data = {
        "id": event.id,
        "user_id": event.user_id,
        "owner_type": event.owner_type,
        "owner_id": event.owner_id,
        "name": event.name,
        "description": event.description,
        "date": _iso(event.date),
        "time": event.time.strftime("%H:%M") if event.time else None,
        "price": _money(event.price),
        "ticket_url": event.ticket_url,
        "category": event.category,
        "capacity": event.capacity,
        "poster": normalize_media_url(event.poster),
        "gallery": gallery_urls(event.gallery),
        "venue_id": event.venue_id,
        "venue": venue_summary(event.venue),
        "artist_ids": event.artist_ids,
        "artists": [artist_summary(link.artist) for link in event.artist_links if link.artist],
        "created_at": _iso(event.created_at),
    }
    data.update(_ownership_flags(event, principal))
    if features is not None:
        data["features"] = features
    return data


def feature_to_dict(feature: PaidFeature) -> Dict[str, Any]:
    return {
        "id": feature.id,
        "key": feature.key,
        "name": feature.name,
        "description": feature.description,
        "target": feature.target,
        "billing_type": feature.billing_type,
        "default_price": _money(feature.default_price),
        "is_active": feature.is_active,
    }


def purchase_to_dict(purchase: PurchasedFeature) -> Dict[str, Any]:
    return {
        "id": purchase.id,
        "owner_type": purchase.owner_type,
        "owner_id": purchase.owner_id,
        "feature_id": purchase.feature_id,
        "feature_key": purchase.feature.key if purchase.feature else None,
        "status": purchase.status,
        "starts_at": _iso(purchase.starts_at),
        "ends_at": _iso(purchase.ends_at),
        "price_paid": _money(purchase.price_paid),
        "metadata": purchase.meta or {},
        "created_at": _iso(purchase.created_at),
    }


def favorite_to_dict(favorite: Favorite) -> Dict[str, Any]:
    return {
        "id": favorite.id,
        "type": favorite.type,
        "itemId": favorite.item_id,
        "created_at": _iso(favorite.created_at),
    }


def rating_to_dict(rating: Rating) -> Dict[str, Any]:
    return {
        "id": rating.id,
        "user_id": rating.user_id,
        "username": rating.user.username if rating.user else None,
        "rateable_type": rating.rateable_type,
        "rateable_id": rating.rateable_id,
        "rating": float(rating.rating),
        "review": rating.review,
        "created_at": _iso(rating.created_at),
        "updated_at": _iso(rating.updated_at),
    }


def notification_to_dict(notification: Notification) -> Dict[str, Any]:
    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "data": notification.data or {},
        "is_read": notification.is_read,
        "created_at": _iso(notification.created_at),
    }
