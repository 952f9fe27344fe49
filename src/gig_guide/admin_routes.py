"""
Admin API routes
Protected endpoints for the paid feature catalog and purchase lifecycle
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from .auth import require_admin
from .db import get_db, User
from .db.models import Artist, Event, Organiser, PurchasedFeature, Venue
from .schemas import FeatureCreate, FeatureUpdate
from .serializers import feature_to_dict, purchase_to_dict
from .services.feature_service import FeatureService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/stats")
def get_stats(admin_user: User = Depends(require_admin), db: Session = Depends(get_db)):
    """
    Directory counts (admin only)

    Returns:
        Totals per resource plus purchases grouped by status
    """
    purchases = dict(
        db.query(PurchasedFeature.status, func.count(PurchasedFeature.id))
        .group_by(PurchasedFeature.status)
        .all()
    )
    return {
        "users": db.query(func.count(User.id)).scalar(),
        "artists": db.query(func.count(Artist.id)).scalar(),
        "organisers": db.query(func.count(Organiser.id)).scalar(),
        "venues": db.query(func.count(Venue.id)).scalar(),
        "events": db.query(func.count(Event.id)).scalar(),
        "purchases": purchases,
    }


@router.get("/features")
def list_features(
    include_inactive: bool = True,
    admin_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    features = FeatureService(db).list_catalog(include_inactive=include_inactive)
    return [feature_to_dict(feature) for feature in features]


@router.post("/features", status_code=status.HTTP_201_CREATED)
def create_feature(
    payload: FeatureCreate,
    admin_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    feature = FeatureService(db).create_feature(payload.model_dump())
    logger.info(f"Admin {admin_user.id} created paid feature {feature.key}")
    return feature_to_dict(feature)


@router.put("/features/{feature_id}")
def update_feature(
    feature_id: int,
    payload: FeatureUpdate,
    admin_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    feature = FeatureService(db).update_feature(feature_id, payload.model_dump(exclude_unset=True))
    logger.info(f"Admin {admin_user.id} updated paid feature {feature.key}")
    return feature_to_dict(feature)


@router.post("/features/purchases/{purchase_id}/activate")
def activate_purchase(
    purchase_id: int,
    admin_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Activate a pending purchase once payment has been confirmed"""
    purchase = FeatureService(db).activate(purchase_id)
    logger.info(f"Admin {admin_user.id} activated purchase {purchase.id}")
    return purchase_to_dict(purchase)


@router.post("/features/expire")
def expire_features(admin_user: User = Depends(require_admin), db: Session = Depends(get_db)):
    count = FeatureService(db).expire_due()
    return {"expired": count}
