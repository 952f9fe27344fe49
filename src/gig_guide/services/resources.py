"""
Lookup of polymorphic resources by (type, id)
"""
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..db.models import (
    Artist, Organiser, Venue, Event, Favorite, Rating, PurchasedFeature, PurchasedFeatureStatus
)
from ..exceptions import NotFoundError, PermissionDeniedError
from .ownership import Principal, can_modify

RESOURCE_MODELS = {
    "artist": Artist,
    "organiser": Organiser,
    "venue": Venue,
    "event": Event,
}


def find_resource(db: Session, resource_type: str, resource_id: int) -> Optional[Any]:
    model = RESOURCE_MODELS.get(resource_type)
    if model is None:
        return None
    return db.query(model).filter(model.id == resource_id).first()


def get_resource(db: Session, resource_type: str, resource_id: int) -> Any:
    """Fetch a resource or raise NotFoundError"""
    resource = find_resource(db, resource_type, resource_id)
    if resource is None:
        raise NotFoundError(f"{resource_type.capitalize()} {resource_id} not found")
    return resource


def require_modify(principal: Optional[Principal], resource: Any, action: str = "modify") -> None:
    """Raise PermissionDeniedError unless the principal owns the resource or is an admin"""
    if not can_modify(principal, resource):
        kind = type(resource).__name__.lower()
        raise PermissionDeniedError(f"You are not allowed to {action} this {kind}")


def purge_references(db: Session, resource_type: str, resource_id: int) -> None:
    """
    Drop favorites and ratings that point at a deleted resource and cancel
    its open feature purchases. Caller commits.
    """
    db.query(Favorite).filter(Favorite.type == resource_type, Favorite.item_id == resource_id).delete(
        synchronize_session=False
    )
    db.query(Rating).filter(Rating.rateable_type == resource_type, Rating.rateable_id == resource_id).delete(
        synchronize_session=False
    )
    db.query(PurchasedFeature).filter(
        PurchasedFeature.owner_type == resource_type,
        PurchasedFeature.owner_id == resource_id,
        PurchasedFeature.status.in_([PurchasedFeatureStatus.PENDING.value, PurchasedFeatureStatus.ACTIVE.value]),
    ).update({PurchasedFeature.status: PurchasedFeatureStatus.CANCELED.value}, synchronize_session=False)
