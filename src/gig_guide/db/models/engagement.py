"""
Favorites, ratings and in-app notifications
"""
import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Numeric, DateTime, ForeignKey, Index, UniqueConstraint, JSON
)
from sqlalchemy.orm import relationship

from ..base import Base


class ItemType(str, enum.Enum):
    """Resource types that can be favorited or rated"""
    ARTIST = "artist"
    EVENT = "event"
    VENUE = "venue"
    ORGANISER = "organiser"


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    item_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("user_id", "type", "item_id", name="uq_favorites_user_item"),
        Index("idx_favorites_item", "type", "item_id"),
    )


class Rating(Base):
    """A 1-5 star rating with an optional review, one per user per item"""
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rateable_type = Column(String(20), nullable=False)
    rateable_id = Column(Integer, nullable=False)
    rating = Column(Numeric(2, 1), nullable=False)
    review = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("user_id", "rateable_type", "rateable_id", name="uq_ratings_user_item"),
        Index("idx_ratings_item", "rateable_type", "rateable_id"),
    )


class Notification(Base):
    """In-app notification delivered to one user"""
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False, default="general")
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = relationship("User", back_populates="notifications")

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, type={self.type}, is_read={self.is_read})>"
