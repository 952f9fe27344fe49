"""
Feature Service - paid feature catalog and purchased feature lifecycle

A purchase moves through:

    pending -> active -> expired
    pending -> canceled
    active  -> canceled

Payment capture happens outside this service; an admin activating a
pending purchase stands in for it.
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from sqlalchemy.orm import Session, joinedload

from ..config import config
from ..db.models import (
    PaidFeature,
    PurchasedFeature,
    PurchasedFeatureStatus,
    FeatureTarget,
    BillingType,
)
from ..exceptions import ConflictError, InvalidInputError, InvalidTransitionError, NotFoundError
from .ownership import Principal
from .resources import get_resource, require_modify

logger = logging.getLogger(__name__)

CATALOG_PATH = Path(__file__).parent.parent / "config" / "paid_features.yaml"

ALLOWED_TRANSITIONS = {
    PurchasedFeatureStatus.PENDING.value: {
        PurchasedFeatureStatus.ACTIVE.value,
        PurchasedFeatureStatus.CANCELED.value,
    },
    PurchasedFeatureStatus.ACTIVE.value: {
        PurchasedFeatureStatus.EXPIRED.value,
        PurchasedFeatureStatus.CANCELED.value,
    },
}

CATALOG_FIELDS = ("name", "description", "target", "billing_type", "default_price", "is_active")


def load_catalog(path: Optional[Path] = None) -> List[Dict[str, Any]]:
    """Read the feature catalog from YAML"""
    with open(path or CATALOG_PATH, "r") as f:
        data = yaml.safe_load(f) or {}
    return data.get("features", [])


class FeatureService:
    """Catalog management, purchases and feature checks"""

    def __init__(self, db: Session):
        self.db = db

    # Catalog

    def list_catalog(self, include_inactive: bool = False) -> List[PaidFeature]:
        query = self.db.query(PaidFeature)
        if not include_inactive:
            query = query.filter(PaidFeature.is_active.is_(True))
        return query.order_by(PaidFeature.key).all()

    def get_feature(self, feature_id: int) -> PaidFeature:
        feature = self.db.query(PaidFeature).filter(PaidFeature.id == feature_id).first()
        if feature is None:
            raise NotFoundError(f"Feature {feature_id} not found")
        return feature

    def get_feature_by_key(self, key: str) -> PaidFeature:
        feature = self.db.query(PaidFeature).filter(PaidFeature.key == key).first()
        if feature is None:
            raise NotFoundError(f"Feature '{key}' not found")
        return feature

    def create_feature(self, data: Dict[str, Any]) -> PaidFeature:
        if self.db.query(PaidFeature).filter(PaidFeature.key == data["key"]).first():
            raise ConflictError(f"Feature '{data['key']}' already exists")

        feature = PaidFeature(key=data["key"], **{k: data[k] for k in CATALOG_FIELDS if data.get(k) is not None})
        self.db.add(feature)
        self.db.commit()
        self.db.refresh(feature)
        logger.info(f"Created paid feature {feature.key}")
        return feature

    def update_feature(self, feature_id: int, data: Dict[str, Any]) -> PaidFeature:
        feature = self.get_feature(feature_id)
        for field in CATALOG_FIELDS:
            if data.get(field) is not None:
                setattr(feature, field, data[field])
        self.db.commit()
        self.db.refresh(feature)
        logger.info(f"Updated paid feature {feature.key}")
        return feature

    def seed_catalog(self, entries: Optional[List[Dict[str, Any]]] = None) -> Tuple[int, int]:
        """
        Upsert catalog entries by key.

        Returns:
            (created, updated) counts
        """
        created = updated = 0
        for entry in entries if entries is not None else load_catalog():
            feature = self.db.query(PaidFeature).filter(PaidFeature.key == entry["key"]).first()
            values = {k: entry[k] for k in CATALOG_FIELDS if k in entry}
            if "default_price" in values:
                values["default_price"] = Decimal(str(values["default_price"]))

            if feature is None:
                self.db.add(PaidFeature(key=entry["key"], **values))
                created += 1
            else:
                for field, value in values.items():
                    setattr(feature, field, value)
                updated += 1

        self.db.commit()
        logger.info(f"Feature catalog seeded: {created} created, {updated} updated")
        return created, updated

    # Purchases

    def get_purchase(self, purchase_id: int) -> PurchasedFeature:
        purchase = (
            self.db.query(PurchasedFeature)
            .options(joinedload(PurchasedFeature.feature))
            .filter(PurchasedFeature.id == purchase_id)
            .first()
        )
        if purchase is None:
            raise NotFoundError(f"Purchase {purchase_id} not found")
        return purchase

    def list_purchases(self, owner_type: str, owner_id: int) -> List[PurchasedFeature]:
        return (
            self.db.query(PurchasedFeature)
            .options(joinedload(PurchasedFeature.feature))
            .filter(PurchasedFeature.owner_type == owner_type, PurchasedFeature.owner_id == owner_id)
            .order_by(PurchasedFeature.created_at.desc())
            .all()
        )

    def purchase(
        self,
        principal: Principal,
        owner_type: str,
        owner_id: int,
        feature_key: str,
        duration_days: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PurchasedFeature:
        """Create a pending purchase for a resource the principal controls"""
        feature = self.get_feature_by_key(feature_key)
        if not feature.is_active:
            raise InvalidInputError(f"Feature '{feature_key}' is not available")
        if feature.target not in (FeatureTarget.ANY.value, owner_type):
            raise InvalidInputError(f"Feature '{feature_key}' cannot be applied to a {owner_type}")

        resource = get_resource(self.db, owner_type, owner_id)
        require_modify(principal, resource, "purchase features for")

        if duration_days is None and feature.billing_type == BillingType.RECURRING.value:
            duration_days = config.FEATURE_RECURRING_PERIOD_DAYS
        if duration_days is not None and duration_days <= 0:
            raise InvalidInputError("duration_days must be positive")

        meta = dict(metadata or {})
        if duration_days is not None:
            meta["duration_days"] = duration_days

        purchase = PurchasedFeature(
            owner_type=owner_type,
            owner_id=owner_id,
            feature_id=feature.id,
            status=PurchasedFeatureStatus.PENDING.value,
            price_paid=feature.default_price,
            meta=meta,
            purchased_by=principal.id,
        )
        self.db.add(purchase)
        self.db.commit()
        self.db.refresh(purchase)
        logger.info(f"Purchase {purchase.id} of {feature.key} created for {owner_type}:{owner_id}")
        return purchase

    def _transition(self, purchase: PurchasedFeature, target: str) -> None:
        if target not in ALLOWED_TRANSITIONS.get(purchase.status, set()):
            raise InvalidTransitionError(
                f"Cannot move purchase {purchase.id} from {purchase.status} to {target}",
                details={"from": purchase.status, "to": target},
            )
        purchase.status = target

    def activate(self, purchase_id: int, now: Optional[datetime] = None) -> PurchasedFeature:
        """pending -> active; the window starts now and runs for duration_days when set"""
        purchase = self.get_purchase(purchase_id)
        self._transition(purchase, PurchasedFeatureStatus.ACTIVE.value)

        now = now or datetime.utcnow()
        purchase.starts_at = now
        duration_days = (purchase.meta or {}).get("duration_days")
        purchase.ends_at = now + timedelta(days=int(duration_days)) if duration_days else None

        self.db.commit()
        self.db.refresh(purchase)
        logger.info(f"Purchase {purchase.id} activated until {purchase.ends_at or 'further notice'}")
        return purchase

    def cancel(self, principal: Principal, purchase_id: int) -> PurchasedFeature:
        purchase = self.get_purchase(purchase_id)
        resource = get_resource(self.db, purchase.owner_type, purchase.owner_id)
        require_modify(principal, resource, "cancel features for")

        self._transition(purchase, PurchasedFeatureStatus.CANCELED.value)
        self.db.commit()
        self.db.refresh(purchase)
        logger.info(f"Purchase {purchase.id} canceled by user {principal.id}")
        return purchase

    def expire_due(self, now: Optional[datetime] = None) -> int:
        """Mark active purchases whose window has closed as expired"""
        now = now or datetime.utcnow()
        due = (
            self.db.query(PurchasedFeature)
            .filter(
                PurchasedFeature.status == PurchasedFeatureStatus.ACTIVE.value,
                PurchasedFeature.ends_at.isnot(None),
                PurchasedFeature.ends_at < now,
            )
            .all()
        )
        for purchase in due:
            self._transition(purchase, PurchasedFeatureStatus.EXPIRED.value)

        self.db.commit()
        if due:
            logger.info(f"Expired {len(due)} purchased feature(s)")
        return len(due)

    # Checks

    def _active_query(self, owner_type: str, owner_id: int, at: datetime):
        return (
            self.db.query(PurchasedFeature)
            .join(PaidFeature, PurchasedFeature.feature_id == PaidFeature.id)
            .filter(
                PurchasedFeature.owner_type == owner_type,
                PurchasedFeature.owner_id == owner_id,
                PurchasedFeature.status == PurchasedFeatureStatus.ACTIVE.value,
                PurchasedFeature.starts_at <= at,
                (PurchasedFeature.ends_at.is_(None)) | (PurchasedFeature.ends_at >= at),
            )
        )

    def has_feature(self, owner_type: str, owner_id: int, key: str, at: Optional[datetime] = None) -> bool:
        at = at or datetime.utcnow()
        return (
            self._active_query(owner_type, owner_id, at)
            .filter(PaidFeature.key == key)
            .first()
            is not None
        )

    def active_feature_keys(self, owner_type: str, owner_id: int, at: Optional[datetime] = None) -> List[str]:
        at = at or datetime.utcnow()
        rows = (
            self._active_query(owner_type, owner_id, at)
            .with_entities(PaidFeature.key)
            .distinct()
            .all()
        )
        return sorted(row[0] for row in rows)
