"""
Event API routes
"""
import datetime as dt
import json
import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session, selectinload

from .auth import get_current_principal, get_optional_principal
from .db import get_db, User
from .db.models import Artist, Event, EventArtist
from .exceptions import InvalidInputError, NotFoundError, PermissionDeniedError
from .schemas import EventArtistsRequest, EventOwnerLiteral, EventUpdate
from .serializers import artist_summary, event_to_dict
from .services.feature_service import FeatureService
from .services.media_paths import append_gallery, storage_key_from_path
from .services.ownership import Principal, is_owner, owner_identity
from .services.resources import get_resource, purge_references, require_modify
from .services.storage_provider import MediaStorage, folder_name_for, get_media_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])


def parse_artist_ids(values: Optional[Iterable]) -> List[int]:
    """
    Accept artist ids as a list, a JSON array string or a comma-separated
    string (or repeated form fields holding any of those).
    """
    if values is None:
        return []
    if isinstance(values, (str, int)):
        values = [values]

    ids: List[int] = []
    for value in values:
        if isinstance(value, int):
            candidates = [value]
        else:
            text = str(value).strip()
            if not text:
                continue
            if text.startswith("["):
                try:
                    candidates = json.loads(text)
                except json.JSONDecodeError:
                    raise InvalidInputError(f"artist_ids is not a valid JSON array: {text}")
            else:
                candidates = text.split(",")

        for candidate in candidates:
            try:
                artist_id = int(str(candidate).strip())
            except ValueError:
                raise InvalidInputError(f"Invalid artist id: {candidate!r}")
            if artist_id not in ids:
                ids.append(artist_id)
    return ids


def _check_artists_exist(db: Session, artist_ids: List[int]) -> None:
    if not artist_ids:
        return
    found = {row[0] for row in db.query(Artist.id).filter(Artist.id.in_(artist_ids)).all()}
    missing = [artist_id for artist_id in artist_ids if artist_id not in found]
    if missing:
        raise InvalidInputError(f"Unknown artist id(s): {', '.join(str(m) for m in missing)}")


def _check_owner_exists(db: Session, owner_type: str, owner_id: int) -> None:
    if owner_type == "user":
        if db.query(User.id).filter(User.id == owner_id).first() is None:
            raise NotFoundError(f"User {owner_id} not found")
    else:
        get_resource(db, owner_type, owner_id)


def _resolve_event_owner(db: Session, principal: Principal,
                         owner_type: Optional[str], owner_id: Optional[int]):
    if owner_type is None and owner_id is None:
        return owner_identity(principal)
    if owner_type is None or owner_id is None:
        raise InvalidInputError("owner_type and owner_id must be given together")

    if not principal.is_admin and not is_owner(principal, owner_type, owner_id):
        raise PermissionDeniedError("You can only create events for your own profile")
    _check_owner_exists(db, owner_type, owner_id)
    return owner_type, owner_id


def _event_folder(event: Event) -> str:
    if not event.folder_name:
        event.folder_name = folder_name_for(event.id, event.name)
    return f"events/{event.folder_name}"


def _set_lineup(db: Session, event: Event, artist_ids: List[int]) -> None:
    """Replace the line-up, keeping link rows for artists that stay on it"""
    _check_artists_exist(db, artist_ids)
    for link in list(event.artist_links):
        if link.artist_id not in artist_ids:
            event.artist_links.remove(link)
    current = set(event.artist_ids)
    for artist_id in artist_ids:
        if artist_id not in current:
            event.artist_links.append(EventArtist(artist_id=artist_id))


def _get_event(db: Session, event_id: int) -> Event:
    event = (
        db.query(Event)
        .options(selectinload(Event.artist_links).selectinload(EventArtist.artist))
        .filter(Event.id == event_id)
        .first()
    )
    if event is None:
        raise NotFoundError(f"Event {event_id} not found")
    return event


@router.get("")
def list_events(
    upcoming: bool = False,
    category: Optional[str] = Query(None, max_length=100),
    venue_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    query = db.query(Event).options(selectinload(Event.artist_links).selectinload(EventArtist.artist))
    if upcoming:
        query = query.filter(Event.date >= dt.date.today())
    if category:
        query = query.filter(Event.category.ilike(category))
    if venue_id is not None:
        query = query.filter(Event.venue_id == venue_id)
    events = query.order_by(Event.date, Event.time).offset((page - 1) * limit).limit(limit).all()
    return [event_to_dict(event, principal) for event in events]


@router.post("/create_event", status_code=status.HTTP_201_CREATED)
def create_event(
    name: str = Form(..., min_length=1, max_length=255),
    date: dt.date = Form(...),
    time: dt.time = Form(...),
    description: Optional[str] = Form(None),
    price: Optional[Decimal] = Form(None, ge=0),
    ticket_url: Optional[str] = Form(None, max_length=500),
    category: Optional[str] = Form(None, max_length=100),
    capacity: Optional[int] = Form(None, ge=0),
    venue_id: Optional[int] = Form(None),
    owner_type: Optional[EventOwnerLiteral] = Form(None),
    owner_id: Optional[int] = Form(None),
    artist_ids: Optional[List[str]] = Form(None),
    poster: Optional[UploadFile] = File(None),
    gallery: Optional[List[UploadFile]] = File(None),
    principal: Principal = Depends(get_current_principal),
    storage: MediaStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
):
    """Create an event from a multipart form with an optional poster and gallery"""
    resolved_type, resolved_id = _resolve_event_owner(db, principal, owner_type, owner_id)
    if venue_id is not None:
        get_resource(db, "venue", venue_id)

    event = Event(
        user_id=principal.id,
        owner_type=resolved_type,
        owner_id=resolved_id,
        name=name.strip(),
        description=description,
        date=date,
        time=time,
        price=price,
        ticket_url=ticket_url,
        category=category,
        capacity=capacity,
        venue_id=venue_id,
    )
    db.add(event)
    db.flush()

    _set_lineup(db, event, parse_artist_ids(artist_ids))

    folder = _event_folder(event)
    with storage.staged() as batch:
        if poster is not None:
            event.poster = batch.save_image(poster, f"{folder}/poster")
        if gallery:
            event.gallery = append_gallery(None, batch.save_images(gallery, f"{folder}/gallery"))
        db.commit()
    logger.info(f"Event {event.id} created by user {principal.id} (owner={resolved_type}:{resolved_id})")
    return event_to_dict(_get_event(db, event.id), principal)


@router.get("/owner/{owner_type}/{owner_id}")
def list_events_by_owner(
    owner_type: EventOwnerLiteral,
    owner_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    events = (
        db.query(Event)
        .options(selectinload(Event.artist_links).selectinload(EventArtist.artist))
        .filter(Event.owner_type == owner_type, Event.owner_id == owner_id)
        .order_by(Event.date, Event.time)
        .all()
    )
    return [event_to_dict(event, principal) for event in events]


@router.get("/{event_id}")
def get_event(
    event_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    event = _get_event(db, event_id)
    features = FeatureService(db).active_feature_keys("event", event.id)
    return event_to_dict(event, principal, features=features)


@router.put("/edit/{event_id}")
def update_event(
    event_id: int,
    payload: EventUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    event = _get_event(db, event_id)
    require_modify(principal, event, "edit")

    changes = payload.model_dump(exclude_unset=True)
    artist_ids = changes.pop("artist_ids", None)
    if changes.get("venue_id") is not None:
        get_resource(db, "venue", changes["venue_id"])

    for field, value in changes.items():
        if field in ("name", "date", "time") and value is None:
            continue
        setattr(event, field, value)
    if artist_ids is not None:
        _set_lineup(db, event, parse_artist_ids(artist_ids))

    db.commit()
    logger.info(f"Event {event.id} updated by user {principal.id}")
    return event_to_dict(_get_event(db, event_id), principal)


@router.delete("/delete/{event_id}")
def delete_event(
    event_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    event = _get_event(db, event_id)
    require_modify(principal, event, "delete")

    purge_references(db, "event", event.id)
    db.delete(event)
    db.commit()

    logger.info(f"Event {event_id} deleted by user {principal.id}")
    return {"message": "Event deleted successfully", "id": event_id}


@router.get("/{event_id}/artists")
def get_event_artists(event_id: int, db: Session = Depends(get_db)):
    event = _get_event(db, event_id)
    return [artist_summary(link.artist) for link in event.artist_links if link.artist]


@router.post("/{event_id}/artists")
def add_event_artists(
    event_id: int,
    payload: EventArtistsRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Add artists to the line-up; artists already listed are left as they are"""
    event = _get_event(db, event_id)
    require_modify(principal, event, "change the line-up of")

    new_ids = [artist_id for artist_id in payload.artist_ids if artist_id not in event.artist_ids]
    _check_artists_exist(db, new_ids)
    for artist_id in new_ids:
        event.artist_links.append(EventArtist(artist_id=artist_id))
    db.commit()

    event = _get_event(db, event_id)
    return [artist_summary(link.artist) for link in event.artist_links if link.artist]


@router.delete("/{event_id}/artists/{artist_id}")
def remove_event_artist(
    event_id: int,
    artist_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    event = _get_event(db, event_id)
    require_modify(principal, event, "change the line-up of")

    link = next((link for link in event.artist_links if link.artist_id == artist_id), None)
    if link is None:
        raise NotFoundError(f"Artist {artist_id} is not on the line-up of event {event_id}")
    event.artist_links.remove(link)
    db.commit()
    return {"message": "Artist removed from event", "event_id": event_id, "artist_id": artist_id}


@router.post("/{event_id}/poster")
def upload_event_poster(
    event_id: int,
    poster: UploadFile = File(...),
    principal: Principal = Depends(get_current_principal),
    storage: MediaStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
):
    event = _get_event(db, event_id)
    require_modify(principal, event, "change the poster of")

    previous = event.poster
    with storage.staged() as batch:
        event.poster = batch.save_image(poster, f"{_event_folder(event)}/poster")
        db.commit()
    storage.delete_path(storage_key_from_path(previous))

    return event_to_dict(_get_event(db, event_id), principal)


@router.post("/{event_id}/gallery")
def upload_event_gallery(
    event_id: int,
    gallery: List[UploadFile] = File(...),
    principal: Principal = Depends(get_current_principal),
    storage: MediaStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
):
    event = _get_event(db, event_id)
    require_modify(principal, event, "upload images for")

    with storage.staged() as batch:
        stored = batch.save_images(gallery, f"{_event_folder(event)}/gallery")
        event.gallery = append_gallery(event.gallery, stored)
        db.commit()

    logger.info(f"{len(stored)} gallery image(s) added to event {event.id}")
    return event_to_dict(_get_event(db, event_id), principal)
