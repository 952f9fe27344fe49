"""
Artist and organiser profile models

Both profiles own themselves: resources they control reference them as
("artist", artist.id) or ("organiser", organiser.id).
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from ..base import Base


class Artist(Base):
    """Performer profile attached to an artist account"""
    __tablename__ = "artists"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    stage_name = Column(String(255), nullable=False, index=True)
    real_name = Column(String(255), nullable=True)
    genre = Column(String(100), nullable=True, index=True)
    bio = Column(Text, nullable=True)
    phone_number = Column(String(50), nullable=True)
    instagram = Column(String(255), nullable=True)
    facebook = Column(String(255), nullable=True)
    twitter = Column(String(255), nullable=True)
    profile_picture = Column(String(500), nullable=True)
    # JSON-encoded list of stored paths
    gallery = Column(Text, nullable=True)
    folder_name = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="artist")
    event_links = relationship("EventArtist", back_populates="artist", cascade="all, delete-orphan")

    @property
    def owner_type(self) -> str:
        return "artist"

    @property
    def owner_id(self) -> int:
        return self.id

    def __repr__(self):
        return f"<Artist(id={self.id}, stage_name={self.stage_name})>"


class Organiser(Base):
    """Promoter/organiser profile attached to an organiser account"""
    __tablename__ = "organisers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    name = Column(String(255), nullable=False, index=True)
    contact_email = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    website = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    profile_picture = Column(String(500), nullable=True)
    gallery = Column(Text, nullable=True)
    folder_name = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="organiser")

    @property
    def owner_type(self) -> str:
        return "organiser"

    @property
    def owner_id(self) -> int:
        return self.id

    def __repr__(self):
        return f"<Organiser(id={self.id}, name={self.name})>"
