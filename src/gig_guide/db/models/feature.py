"""
Paid feature catalog and purchased feature models
"""
import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, DateTime, ForeignKey, Index, JSON
from sqlalchemy.orm import relationship

from ..base import Base


class FeatureTarget(str, enum.Enum):
    ARTIST = "artist"
    VENUE = "venue"
    EVENT = "event"
    ANY = "any"


class BillingType(str, enum.Enum):
    ONE_TIME = "one_time"
    RECURRING = "recurring"
    CONSUMPTION = "consumption"


class FeatureOwnerType(str, enum.Enum):
    ARTIST = "artist"
    VENUE = "venue"
    EVENT = "event"


class PurchasedFeatureStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    CANCELED = "canceled"
    EXPIRED = "expired"


class PaidFeature(Base):
    """A purchasable capability, e.g. a featured badge or homepage spotlight"""
    __tablename__ = "paid_features"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    target = Column(String(20), default=FeatureTarget.ANY.value, nullable=False)
    billing_type = Column(String(20), default=BillingType.ONE_TIME.value, nullable=False)
    default_price = Column(Numeric(10, 2), nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    purchases = relationship("PurchasedFeature", back_populates="feature")

    def __repr__(self):
        return f"<PaidFeature(key={self.key}, target={self.target}, billing_type={self.billing_type})>"


class PurchasedFeature(Base):
    """
    A feature granted to exactly one owner entity for a time window.

    The owner is the (owner_type, owner_id) pair rather than a foreign key,
    so one table covers artists, venues and events.
    """
    __tablename__ = "purchased_features"

    id = Column(Integer, primary_key=True, index=True)
    owner_type = Column(String(20), nullable=False)
    owner_id = Column(Integer, nullable=False)
    feature_id = Column(Integer, ForeignKey("paid_features.id"), nullable=False)

    status = Column(String(20), default=PurchasedFeatureStatus.PENDING.value, nullable=False)
    starts_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    ends_at = Column(DateTime, nullable=True)
    price_paid = Column(Numeric(10, 2), nullable=True)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)

    # Account that placed the purchase
    purchased_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    feature = relationship("PaidFeature", back_populates="purchases")

    __table_args__ = (
        Index("idx_purchased_features_owner", "owner_type", "owner_id"),
        Index("idx_purchased_features_feature", "feature_id"),
        Index("idx_purchased_features_status_ends", "status", "ends_at"),
    )

    def __repr__(self):
        return (
            f"<PurchasedFeature(id={self.id}, owner={self.owner_type}:{self.owner_id}, "
            f"feature_id={self.feature_id}, status={self.status})>"
        )
