"""
Event and event line-up models
"""
import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Text, Date, Time, Numeric, DateTime, ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.orm import relationship

from ..base import Base


class EventOwnerType(str, enum.Enum):
    ARTIST = "artist"
    ORGANISER = "organiser"
    USER = "user"


class Event(Base):
    """A dated event at an optional venue, owned by an artist, organiser or plain user"""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    owner_type = Column(String(20), nullable=False)
    owner_id = Column(Integer, nullable=False)

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(Time, nullable=False)
    price = Column(Numeric(10, 2), nullable=True)
    ticket_url = Column(String(500), nullable=True)
    category = Column(String(100), nullable=True)
    capacity = Column(Integer, nullable=True)

    poster = Column(String(500), nullable=True)
    gallery = Column(Text, nullable=True)
    folder_name = Column(String(255), nullable=True)

    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    venue = relationship("Venue")
    artist_links = relationship("EventArtist", back_populates="event", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_events_owner", "owner_type", "owner_id"),
    )

    @property
    def artist_ids(self):
        return [link.artist_id for link in self.artist_links]

    def __repr__(self):
        return f"<Event(id={self.id}, name={self.name}, date={self.date})>"


class EventArtist(Base):
    """Artist performing at an event"""
    __tablename__ = "event_artists"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    artist_id = Column(Integer, ForeignKey("artists.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    event = relationship("Event", back_populates="artist_links")
    artist = relationship("Artist", back_populates="event_links")

    __table_args__ = (
        UniqueConstraint("event_id", "artist_id", name="uq_event_artist"),
    )
