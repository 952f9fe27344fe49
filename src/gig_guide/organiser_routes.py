"""
Organiser profile API routes
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from .auth import get_current_principal, get_optional_principal, principal_for, restrict_to
from .db import get_db, User
from .db.models import Organiser, UserRole
from .exceptions import ConflictError
from .schemas import OrganiserCreate, OrganiserUpdate
from .serializers import organiser_to_dict
from .services.media_paths import append_gallery
from .services.ownership import Principal
from .services.resources import get_resource, require_modify
from .services.storage_provider import MediaStorage, folder_name_for, get_media_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/organisers", tags=["organisers"])


@router.get("")
def list_organisers(
    q: Optional[str] = Query(None, max_length=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    query = db.query(Organiser)
    if q:
        query = query.filter(Organiser.name.ilike(f"%{q.strip()}%"))
    return [organiser_to_dict(o, principal) for o in query.order_by(Organiser.name).all()]


@router.get("/{organiser_id}")
def get_organiser(
    organiser_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return organiser_to_dict(get_resource(db, "organiser", organiser_id), principal)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_organiser(
    payload: OrganiserCreate,
    user: User = Depends(restrict_to(UserRole.ORGANISER)),
    db: Session = Depends(get_db),
):
    """Create the organiser profile for the calling organiser account"""
    if user.organiser is not None:
        raise ConflictError("This account already has an organiser profile")

    organiser = Organiser(user_id=user.id, **payload.model_dump())
    db.add(organiser)
    db.flush()
    organiser.folder_name = folder_name_for(organiser.id, organiser.name)
    db.commit()
    db.refresh(organiser)
    db.refresh(user)

    logger.info(f"Organiser profile {organiser.id} created for user {user.id}")
    return organiser_to_dict(organiser, principal_for(user))


@router.put("/{organiser_id}")
def update_organiser(
    organiser_id: int,
    payload: OrganiserUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    organiser = get_resource(db, "organiser", organiser_id)
    require_modify(principal, organiser, "edit")

    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(organiser, field, value)
    db.commit()
    db.refresh(organiser)
    return organiser_to_dict(organiser, principal)


@router.post("/{organiser_id}/gallery")
def upload_organiser_gallery(
    organiser_id: int,
    gallery: List[UploadFile] = File(...),
    principal: Principal = Depends(get_current_principal),
    storage: MediaStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
):
    organiser = get_resource(db, "organiser", organiser_id)
    require_modify(principal, organiser, "upload images for")

    if not organiser.folder_name:
        organiser.folder_name = folder_name_for(organiser.id, organiser.name)
    with storage.staged() as batch:
        stored = batch.save_images(gallery, f"organisers/{organiser.folder_name}/gallery")
        organiser.gallery = append_gallery(organiser.gallery, stored)
        db.commit()
    db.refresh(organiser)

    logger.info(f"{len(stored)} gallery image(s) added to organiser {organiser.id}")
    return organiser_to_dict(organiser, principal)
