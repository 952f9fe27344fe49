"""
Artist profile API routes
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .auth import get_current_principal, get_optional_principal, principal_for, restrict_to
from .db import get_db, User
from .db.models import Artist, Event, EventArtist, UserRole
from .exceptions import ConflictError, NotFoundError
from .schemas import ArtistCreate, ArtistUpdate
from .serializers import artist_to_dict, event_to_dict
from .services.feature_service import FeatureService
from .services.media_paths import append_gallery, remove_from_gallery, storage_key_from_path
from .services.ownership import Principal
from .services.resources import get_resource, purge_references, require_modify
from .services.storage_provider import MediaStorage, folder_name_for, get_media_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/artists", tags=["artists"])


class GalleryImageDelete(BaseModel):
    image: str


def _artist_folder(artist: Artist) -> str:
    if not artist.folder_name:
        artist.folder_name = folder_name_for(artist.id, artist.stage_name)
    return f"artists/{artist.folder_name}"


@router.get("")
def list_artists(
    genre: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    query = db.query(Artist)
    if genre:
        query = query.filter(Artist.genre.ilike(genre))
    artists = query.order_by(Artist.stage_name).offset((page - 1) * limit).limit(limit).all()
    return [artist_to_dict(artist, principal) for artist in artists]


@router.get("/search")
def search_artists(
    q: str = Query(..., min_length=1, max_length=100),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    """Case-insensitive match on stage name, real name or genre"""
    pattern = f"%{q.strip()}%"
    artists = (
        db.query(Artist)
        .filter(or_(Artist.stage_name.ilike(pattern), Artist.real_name.ilike(pattern), Artist.genre.ilike(pattern)))
        .order_by(Artist.stage_name)
        .limit(50)
        .all()
    )
    return [artist_to_dict(artist, principal) for artist in artists]


@router.get("/user/{user_id}")
def get_artist_by_user(
    user_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    artist = db.query(Artist).filter(Artist.user_id == user_id).first()
    if artist is None:
        raise NotFoundError(f"No artist profile for user {user_id}")
    return artist_to_dict(artist, principal)


@router.get("/{artist_id}")
def get_artist(
    artist_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    artist = get_resource(db, "artist", artist_id)
    features = FeatureService(db).active_feature_keys("artist", artist.id)
    return artist_to_dict(artist, principal, features=features)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_artist(
    payload: ArtistCreate,
    user: User = Depends(restrict_to(UserRole.ARTIST)),
    db: Session = Depends(get_db),
):
    """Create the artist profile for the calling artist account"""
    if user.artist is not None:
        raise ConflictError("This account already has an artist profile")

    artist = Artist(user_id=user.id, **payload.model_dump())
    db.add(artist)
    db.flush()
    artist.folder_name = folder_name_for(artist.id, artist.stage_name)
    db.commit()
    db.refresh(artist)
    db.refresh(user)

    logger.info(f"Artist profile {artist.id} created for user {user.id}")
    return artist_to_dict(artist, principal_for(user))


@router.put("/{artist_id}")
def update_artist(
    artist_id: int,
    payload: ArtistUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    artist = get_resource(db, "artist", artist_id)
    require_modify(principal, artist, "edit")

    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "stage_name" and value is None:
            continue
        setattr(artist, field, value)
    db.commit()
    db.refresh(artist)

    logger.info(f"Artist {artist.id} updated by user {principal.id}")
    return artist_to_dict(artist, principal)


@router.delete("/{artist_id}")
def delete_artist(
    artist_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    artist = get_resource(db, "artist", artist_id)
    require_modify(principal, artist, "delete")

    purge_references(db, "artist", artist.id)
    db.delete(artist)
    db.commit()

    logger.info(f"Artist {artist_id} deleted by user {principal.id}")
    return {"message": "Artist deleted successfully", "id": artist_id}


@router.get("/{artist_id}/events")
def get_artist_events(
    artist_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    """Events the artist owns or performs at, soonest first"""
    get_resource(db, "artist", artist_id)
    lineup_ids = db.query(EventArtist.event_id).filter(EventArtist.artist_id == artist_id)
    events = (
        db.query(Event)
        .filter(
            or_(
                (Event.owner_type == "artist") & (Event.owner_id == artist_id),
                Event.id.in_(lineup_ids),
            )
        )
        .order_by(Event.date, Event.time)
        .all()
    )
    return [event_to_dict(event, principal) for event in events]


@router.post("/{artist_id}/gallery")
def upload_artist_gallery(
    artist_id: int,
    gallery: List[UploadFile] = File(...),
    principal: Principal = Depends(get_current_principal),
    storage: MediaStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
):
    artist = get_resource(db, "artist", artist_id)
    require_modify(principal, artist, "upload images for")

    with storage.staged() as batch:
        stored = batch.save_images(gallery, f"{_artist_folder(artist)}/gallery")
        artist.gallery = append_gallery(artist.gallery, stored)
        db.commit()
    db.refresh(artist)

    logger.info(f"{len(stored)} gallery image(s) added to artist {artist.id}")
    return artist_to_dict(artist, principal)


@router.delete("/{artist_id}/gallery")
def delete_artist_gallery_image(
    artist_id: int,
    payload: GalleryImageDelete,
    principal: Principal = Depends(get_current_principal),
    storage: MediaStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
):
    artist = get_resource(db, "artist", artist_id)
    require_modify(principal, artist, "remove images from")

    artist.gallery, removed = remove_from_gallery(artist.gallery, payload.image)
    if removed is None:
        raise NotFoundError("Image not found in gallery")
    db.commit()

    storage.delete_path(storage_key_from_path(removed))
    db.refresh(artist)
    return artist_to_dict(artist, principal)


@router.post("/{artist_id}/profile-picture")
def upload_artist_profile_picture(
    artist_id: int,
    profile_picture: UploadFile = File(...),
    principal: Principal = Depends(get_current_principal),
    storage: MediaStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
):
    artist = get_resource(db, "artist", artist_id)
    require_modify(principal, artist, "change the picture of")

    previous = artist.profile_picture
    with storage.staged() as batch:
        artist.profile_picture = batch.save_image(profile_picture, f"{_artist_folder(artist)}/profile")
        db.commit()

    storage.delete_path(storage_key_from_path(previous))
    db.refresh(artist)
    return artist_to_dict(artist, principal)
