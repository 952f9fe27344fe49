"""
Paid feature API routes: catalog, feature checks and purchases
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .auth import get_current_principal
from .db import get_db
from .schemas import FeatureOwnerLiteral, PurchaseRequest
from .serializers import feature_to_dict, purchase_to_dict
from .services.feature_service import FeatureService
from .services.ownership import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/features", tags=["features"])


def get_feature_service(db: Session = Depends(get_db)) -> FeatureService:
    return FeatureService(db)


@router.get("/catalog")
def get_catalog(service: FeatureService = Depends(get_feature_service)):
    return {"success": True, "features": [feature_to_dict(f) for f in service.list_catalog()]}


@router.get("/{owner_type}/{owner_id}")
def get_active_features(
    owner_type: FeatureOwnerLiteral,
    owner_id: int,
    service: FeatureService = Depends(get_feature_service),
):
    """Keys of the features currently active for a resource"""
    return {"success": True, "features": service.active_feature_keys(owner_type, owner_id)}


@router.post("/purchases", status_code=status.HTTP_201_CREATED)
def create_purchase(
    payload: PurchaseRequest,
    principal: Principal = Depends(get_current_principal),
    service: FeatureService = Depends(get_feature_service),
):
    purchase = service.purchase(
        principal,
        payload.owner_type,
        payload.owner_id,
        payload.feature_key,
        duration_days=payload.duration_days,
        metadata=payload.metadata,
    )
    return purchase_to_dict(purchase)


@router.post("/purchases/{purchase_id}/cancel")
def cancel_purchase(
    purchase_id: int,
    principal: Principal = Depends(get_current_principal),
    service: FeatureService = Depends(get_feature_service),
):
    return purchase_to_dict(service.cancel(principal, purchase_id))
