"""
Pydantic request schemas
The (owner_type, owner_id) pairs are checked here with Literal types before any lookup
"""
import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

ItemTypeLiteral = Literal["artist", "event", "venue", "organiser"]
VenueOwnerLiteral = Literal["artist", "organiser", "unclaimed"]
EventOwnerLiteral = Literal["artist", "organiser", "user"]
FeatureOwnerLiteral = Literal["artist", "venue", "event"]
FeatureTargetLiteral = Literal["artist", "venue", "event", "any"]
BillingTypeLiteral = Literal["one_time", "recurring", "consumption"]
SignupRoleLiteral = Literal["artist", "organiser", "user"]


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


# Auth

class UserSignup(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    username: Optional[str] = Field(None, max_length=100)
    role: SignupRoleLiteral = "user"


# Artists and organisers

class ArtistBase(BaseModel):
    real_name: Optional[str] = Field(None, max_length=255)
    genre: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=50)
    instagram: Optional[str] = Field(None, max_length=255)
    facebook: Optional[str] = Field(None, max_length=255)
    twitter: Optional[str] = Field(None, max_length=255)


class ArtistCreate(ArtistBase):
    stage_name: str = Field(..., min_length=1, max_length=255)


class ArtistUpdate(ArtistBase):
    stage_name: Optional[str] = Field(None, min_length=1, max_length=255)


class OrganiserBase(BaseModel):
    contact_email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(None, max_length=50)
    website: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None

    @field_validator("contact_email", mode="before")
    @classmethod
    def blank_email(cls, v):
        return _blank_to_none(v)


class OrganiserCreate(OrganiserBase):
    name: str = Field(..., min_length=1, max_length=255)


class OrganiserUpdate(OrganiserBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


# Venues

class VenueBase(BaseModel):
    location: Optional[str] = Field(None, max_length=255)
    capacity: Optional[int] = Field(None, ge=0)
    contact_email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(None, max_length=50)
    website: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    owner_type: Optional[VenueOwnerLiteral] = None
    owner_id: Optional[int] = None

    @field_validator("contact_email", mode="before")
    @classmethod
    def blank_email(cls, v):
        return _blank_to_none(v)

    @model_validator(mode="after")
    def owner_pair(self):
        if self.owner_type == "unclaimed" and self.owner_id is not None:
            raise ValueError("An unclaimed venue cannot have an owner_id")
        if self.owner_type in ("artist", "organiser") and self.owner_id is None:
            raise ValueError(f"owner_id is required when owner_type is '{self.owner_type}'")
        if self.owner_type is None and self.owner_id is not None:
            raise ValueError("owner_type is required when owner_id is given")
        return self


class VenueCreate(VenueBase):
    name: str = Field(..., min_length=1, max_length=255)


class VenueUpdate(VenueBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


# Events

class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    price: Optional[Decimal] = Field(None, ge=0)
    ticket_url: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, max_length=100)
    capacity: Optional[int] = Field(None, ge=0)
    venue_id: Optional[int] = None
    artist_ids: Optional[List[int]] = None


class EventArtistsRequest(BaseModel):
    artist_ids: List[int] = Field(..., min_length=1)


# Favorites

class FavoriteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: ItemTypeLiteral
    item_id: int = Field(..., alias="itemId")


# Features

class PurchaseRequest(BaseModel):
    owner_type: FeatureOwnerLiteral
    owner_id: int
    feature_key: str = Field(..., min_length=1, max_length=100)
    duration_days: Optional[int] = Field(None, gt=0, le=3650)
    metadata: Optional[Dict[str, Any]] = None


class FeatureCreate(BaseModel):
    key: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9_]+$")
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    target: FeatureTargetLiteral = "any"
    billing_type: BillingTypeLiteral = "one_time"
    default_price: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    is_active: bool = True


class FeatureUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    target: Optional[FeatureTargetLiteral] = None
    billing_type: Optional[BillingTypeLiteral] = None
    default_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None


# Ratings

class RatingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rateable_type: ItemTypeLiteral = Field(..., alias="rateableType")
    rateable_id: int = Field(..., alias="rateableId")
    rating: float = Field(..., ge=1, le=5)
    review: Optional[str] = Field(None, max_length=5000)


# Notifications

class NotificationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="userId")
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: str = Field("general", max_length=50)
    data: Optional[Dict[str, Any]] = None


class VenueBookingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    venue_id: int = Field(..., alias="venueId")
    message: str = Field(..., min_length=1, max_length=5000)
    event_date: Optional[str] = Field(None, alias="eventDate")
    details: Optional[Dict[str, Any]] = None
