"""
Ratings API routes
"""
import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from .auth import get_current_user
from .db import get_db, User
from .schemas import ItemTypeLiteral, RatingRequest
from .serializers import rating_to_dict
from .services.rating_service import RatingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ratings", tags=["ratings"])


@router.post("")
def rate_item(
    payload: RatingRequest,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create or replace the caller's rating; 201 on create, 200 on update"""
    row, created = RatingService(db).rate(
        current_user.id, payload.rateable_type, payload.rateable_id, payload.rating, payload.review
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return rating_to_dict(row)


@router.get("/{rateable_type}/{rateable_id}")
def list_ratings(
    rateable_type: ItemTypeLiteral,
    rateable_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    rows, total = RatingService(db).list(rateable_type, rateable_id, page=page, limit=limit)
    return {
        "ratings": [rating_to_dict(row) for row in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit,
        },
    }


@router.get("/{rateable_type}/{rateable_id}/average")
def get_average(rateable_type: ItemTypeLiteral, rateable_id: int, db: Session = Depends(get_db)):
    return RatingService(db).average(rateable_type, rateable_id)


@router.get("/{rateable_type}/{rateable_id}/mine")
def get_my_rating(
    rateable_type: ItemTypeLiteral,
    rateable_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = RatingService(db).get_user_rating(current_user.id, rateable_type, rateable_id)
    return {"rating": rating_to_dict(row) if row else None}


@router.delete("/{rateable_type}/{rateable_id}")
def delete_my_rating(
    rateable_type: ItemTypeLiteral,
    rateable_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    RatingService(db).delete(current_user.id, rateable_type, rateable_id)
    logger.info(f"User {current_user.id} deleted rating for {rateable_type}:{rateable_id}")
    return {"message": "Rating deleted"}
