"""
User account model
"""
import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON
from sqlalchemy.orm import relationship

from ..base import Base


class UserRole(str, enum.Enum):
    """Account roles; the numeric ACL ids follow declaration order"""
    SUPERUSER = "superuser"
    ADMIN = "admin"
    ARTIST = "artist"
    ORGANISER = "organiser"
    VENUE = "venue"
    USER = "user"


# Legacy ACL ids used by older clients
ROLE_ACL_IDS = {
    1: UserRole.SUPERUSER,
    2: UserRole.ADMIN,
    3: UserRole.ARTIST,
    4: UserRole.ORGANISER,
    5: UserRole.VENUE,
    6: UserRole.USER,
}

ADMIN_ROLES = {UserRole.SUPERUSER.value, UserRole.ADMIN.value}


class User(Base):
    """User account model"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), default=UserRole.USER.value, nullable=False, index=True)
    profile_picture = Column(String(500), nullable=True)
    settings = Column(JSON, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    artist = relationship("Artist", back_populates="user", uselist=False)
    organiser = relationship("Organiser", back_populates="user", uselist=False)
    favorites = relationship("Favorite", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
