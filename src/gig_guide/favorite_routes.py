"""
Favorites API routes
"""
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .auth import get_current_user
from .db import get_db, User
from .schemas import FavoriteRequest, ItemTypeLiteral
from .serializers import favorite_to_dict
from .services.favorite_service import FavoriteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


def get_favorite_service(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FavoriteService:
    return FavoriteService(db, current_user.id)


@router.post("", status_code=status.HTTP_201_CREATED)
def add_favorite(payload: FavoriteRequest, service: FavoriteService = Depends(get_favorite_service)):
    favorite = service.add(payload.type, payload.item_id)
    return favorite_to_dict(favorite)


@router.delete("")
def remove_favorite(payload: FavoriteRequest, service: FavoriteService = Depends(get_favorite_service)):
    service.remove(payload.type, payload.item_id)
    return {"message": "Removed from favorites", "type": payload.type, "itemId": payload.item_id}


@router.get("/check")
def check_favorite(
    type: ItemTypeLiteral,
    item_id: int = Query(..., alias="itemId"),
    service: FavoriteService = Depends(get_favorite_service),
):
    return {"isFavorite": service.is_favorite(type, item_id)}


@router.post("/toggle")
def toggle_favorite(payload: FavoriteRequest, service: FavoriteService = Depends(get_favorite_service)):
    """Flip the favorite state; the response carries the new state"""
    return {"isFavorite": service.toggle(payload.type, payload.item_id)}


@router.get("")
def list_favorites(service: FavoriteService = Depends(get_favorite_service)):
    """All favorites grouped by item type"""
    return service.grouped()


@router.get("/{item_type}")
def list_favorites_by_type(item_type: ItemTypeLiteral, service: FavoriteService = Depends(get_favorite_service)):
    return [favorite_to_dict(favorite) for favorite in service.list(item_type)]
