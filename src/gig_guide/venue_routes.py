"""
Venue API routes
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .auth import get_current_principal, get_optional_principal
from .db import get_db
from .db.models import Event, Venue
from .exceptions import ConflictError, InvalidInputError, PermissionDeniedError
from .schemas import VenueCreate, VenueOwnerLiteral, VenueUpdate
from .serializers import venue_to_dict
from .services.feature_service import FeatureService
from .services.media_paths import append_gallery, storage_key_from_path
from .services.ownership import Principal, is_owner, owner_identity
from .services.resources import get_resource, purge_references, require_modify
from .services.storage_provider import MediaStorage, get_media_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/venue", tags=["venues"])

OWNERSHIP_FIELDS = ("owner_type", "owner_id")


def _check_contact_email(db: Session, email: Optional[str], venue_id: Optional[int] = None) -> None:
    if not email:
        return
    query = db.query(Venue.id).filter(Venue.contact_email == email)
    if venue_id is not None:
        query = query.filter(Venue.id != venue_id)
    if query.first() is not None:
        raise ConflictError("A venue with this contact email already exists")


def _resolve_new_owner(db: Session, principal: Principal, payload: VenueCreate):
    """
    Pick the (owner_type, owner_id) for a new venue.

    Admins may assign any owner. Everyone else may list the venue as
    unclaimed or as owned by their own artist/organiser profile.
    """
    if payload.owner_type is None:
        if principal.is_admin:
            return "unclaimed", None
        owner_type, owner_id = owner_identity(principal)
        if owner_type == "user":
            return "unclaimed", None
        return owner_type, owner_id

    if payload.owner_type == "unclaimed":
        return "unclaimed", None

    if principal.is_admin:
        get_resource(db, payload.owner_type, payload.owner_id)
    elif not is_owner(principal, payload.owner_type, payload.owner_id):
        raise PermissionDeniedError("You can only create venues owned by your own profile")
    return payload.owner_type, payload.owner_id


@router.get("")
def list_venues(
    q: Optional[str] = Query(None, max_length=100),
    location: Optional[str] = Query(None, max_length=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    query = db.query(Venue)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(Venue.name.ilike(pattern), Venue.address.ilike(pattern)))
    if location:
        query = query.filter(Venue.location.ilike(f"%{location.strip()}%"))
    return [venue_to_dict(venue, principal) for venue in query.order_by(Venue.name).all()]


@router.get("/owner/{owner_type}/{owner_id}")
def list_venues_by_owner(
    owner_type: VenueOwnerLiteral,
    owner_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    venues = (
        db.query(Venue)
        .filter(Venue.owner_type == owner_type, Venue.owner_id == owner_id)
        .order_by(Venue.name)
        .all()
    )
    return [venue_to_dict(venue, principal) for venue in venues]


@router.get("/{venue_id}")
def get_venue(
    venue_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    venue = get_resource(db, "venue", venue_id)
    features = FeatureService(db).active_feature_keys("venue", venue.id)
    return venue_to_dict(venue, principal, features=features)


@router.post("/createVenue", status_code=status.HTTP_201_CREATED)
def create_venue(
    payload: VenueCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    _check_contact_email(db, payload.contact_email)
    owner_type, owner_id = _resolve_new_owner(db, principal, payload)

    data = payload.model_dump(exclude=set(OWNERSHIP_FIELDS))
    venue = Venue(user_id=principal.id, owner_type=owner_type, owner_id=owner_id, **data)
    db.add(venue)
    db.commit()
    db.refresh(venue)

    logger.info(f"Venue {venue.id} created by user {principal.id} (owner={owner_type}:{owner_id})")
    return venue_to_dict(venue, principal)


@router.put("/updateVenue/{venue_id}")
def update_venue(
    venue_id: int,
    payload: VenueUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    venue = get_resource(db, "venue", venue_id)
    require_modify(principal, venue, "edit")

    changes = payload.model_dump(exclude_unset=True)
    ownership = {k: changes.pop(k) for k in OWNERSHIP_FIELDS if k in changes}
    if ownership and (
        ownership.get("owner_type", venue.owner_type) != venue.owner_type
        or ownership.get("owner_id", venue.owner_id) != venue.owner_id
    ):
        if not principal.is_admin:
            raise PermissionDeniedError("Only an administrator can transfer venue ownership")
        new_type = ownership.get("owner_type", venue.owner_type)
        new_id = None if new_type == "unclaimed" else ownership.get("owner_id", venue.owner_id)
        if new_type != "unclaimed":
            if new_id is None:
                raise InvalidInputError(f"owner_id is required when owner_type is '{new_type}'")
            get_resource(db, new_type, new_id)
        venue.owner_type, venue.owner_id = new_type, new_id
        logger.info(f"Venue {venue.id} transferred to {new_type}:{new_id} by admin {principal.id}")

    if "contact_email" in changes:
        _check_contact_email(db, changes["contact_email"], venue.id)
    for field, value in changes.items():
        if field == "name" and value is None:
            continue
        setattr(venue, field, value)

    db.commit()
    db.refresh(venue)
    return venue_to_dict(venue, principal)


@router.post("/uploadGallery/{venue_id}")
def upload_venue_gallery(
    venue_id: int,
    gallery: Optional[List[UploadFile]] = File(None),
    main_picture: Optional[UploadFile] = File(None),
    principal: Principal = Depends(get_current_principal),
    storage: MediaStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
):
    """Add gallery images and/or replace the main picture"""
    venue = get_resource(db, "venue", venue_id)
    require_modify(principal, venue, "upload images for")

    if not gallery and main_picture is None:
        raise InvalidInputError("Provide gallery images or a main_picture")

    folder = f"venues/{venue.id}"
    previous_main = None
    with storage.staged() as batch:
        if main_picture is not None:
            previous_main = venue.main_picture
            venue.main_picture = batch.save_image(main_picture, folder)
        if gallery:
            stored = batch.save_images(gallery, f"{folder}/gallery")
            venue.venue_gallery = append_gallery(venue.venue_gallery, stored)
        db.commit()

    if previous_main:
        storage.delete_path(storage_key_from_path(previous_main))

    db.refresh(venue)
    return venue_to_dict(venue, principal)


@router.delete("/{venue_id}")
def delete_venue(
    venue_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    venue = get_resource(db, "venue", venue_id)
    require_modify(principal, venue, "delete")

    db.query(Event).filter(Event.venue_id == venue.id).update({Event.venue_id: None}, synchronize_session=False)
    purge_references(db, "venue", venue.id)
    db.delete(venue)
    db.commit()

    logger.info(f"Venue {venue_id} deleted by user {principal.id}")
    return {"message": "Venue deleted successfully", "id": venue_id}
