"""
Venue model
"""
import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, Index

from ..base import Base


class VenueOwnerType(str, enum.Enum):
    ARTIST = "artist"
    ORGANISER = "organiser"
    UNCLAIMED = "unclaimed"


class Venue(Base):
    """
    A performance venue.

    Control is expressed by the (owner_type, owner_id) pair; an unclaimed
    venue has no owner_id and can only be changed by an admin.
    """
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    location = Column(String(255), nullable=True, index=True)
    capacity = Column(Integer, nullable=True)
    contact_email = Column(String(255), unique=True, nullable=True)
    phone_number = Column(String(50), nullable=True)
    website = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Account that created the listing
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    owner_type = Column(String(20), default=VenueOwnerType.UNCLAIMED.value, nullable=False)
    owner_id = Column(Integer, nullable=True)

    main_picture = Column(String(500), nullable=True)
    venue_gallery = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_venues_owner", "owner_type", "owner_id"),
    )

    def __repr__(self):
        return f"<Venue(id={self.id}, name={self.name}, owner={self.owner_type}:{self.owner_id})>"
