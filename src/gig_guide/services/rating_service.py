"""
Rating Service - one 1-5 star rating per user per artist, event, venue or organiser
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db.models import Rating
from ..exceptions import InvalidInputError, NotFoundError
from .resources import get_resource

logger = logging.getLogger(__name__)

MIN_RATING = Decimal("1.0")
MAX_RATING = Decimal("5.0")


class RatingService:

    def __init__(self, db: Session):
        self.db = db

    def _find(self, user_id: int, rateable_type: str, rateable_id: int) -> Optional[Rating]:
        return (
            self.db.query(Rating)
            .filter(
                Rating.user_id == user_id,
                Rating.rateable_type == rateable_type,
                Rating.rateable_id == rateable_id,
            )
            .first()
        )

    def rate(self, user_id: int, rateable_type: str, rateable_id: int,
             rating: float, review: Optional[str] = None) -> Tuple[Rating, bool]:
        """
        Create or replace the user's rating.

        Returns:
            (rating row, created) where created is False for an update
        """
        value = Decimal(str(rating)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        if value < MIN_RATING or value > MAX_RATING:
            raise InvalidInputError("Rating must be between 1 and 5")

        get_resource(self.db, rateable_type, rateable_id)

        existing = self._find(user_id, rateable_type, rateable_id)
        if existing is not None:
            existing.rating = value
            existing.review = review
            self.db.commit()
            self.db.refresh(existing)
            return existing, False

        row = Rating(
            user_id=user_id,
            rateable_type=rateable_type,
            rateable_id=rateable_id,
            rating=value,
            review=review,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info(f"User {user_id} rated {rateable_type}:{rateable_id} {value}")
        return row, True

    def get_user_rating(self, user_id: int, rateable_type: str, rateable_id: int) -> Optional[Rating]:
        return self._find(user_id, rateable_type, rateable_id)

    def delete(self, user_id: int, rateable_type: str, rateable_id: int) -> None:
        row = self._find(user_id, rateable_type, rateable_id)
        if row is None:
            raise NotFoundError("Rating not found")
        self.db.delete(row)
        self.db.commit()

    def average(self, rateable_type: str, rateable_id: int) -> Dict[str, float]:
        avg, count = (
            self.db.query(func.avg(Rating.rating), func.count(Rating.id))
            .filter(Rating.rateable_type == rateable_type, Rating.rateable_id == rateable_id)
            .one()
        )
        return {
            "average": round(float(avg), 1) if avg is not None else 0.0,
            "count": int(count or 0),
        }

    def list(self, rateable_type: str, rateable_id: int,
             page: int = 1, limit: int = 10) -> Tuple[List[Rating], int]:
        """Newest first; returns (page of ratings, total)"""
        query = self.db.query(Rating).filter(
            Rating.rateable_type == rateable_type, Rating.rateable_id == rateable_id
        )
        total = query.count()
        rows = (
            query.order_by(Rating.created_at.desc(), Rating.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return rows, total
