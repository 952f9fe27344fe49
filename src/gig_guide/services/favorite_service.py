"""
Favorite Service - per-user bookmarks of artists, events, venues and organisers
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..db.models import Favorite
from ..exceptions import NotFoundError
from .resources import get_resource

logger = logging.getLogger(__name__)


class FavoriteService:
    """Add, remove, toggle and list favorites for one user"""

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id

    def _find(self, item_type: str, item_id: int) -> Optional[Favorite]:
        return (
            self.db.query(Favorite)
            .filter(
                Favorite.user_id == self.user_id,
                Favorite.type == item_type,
                Favorite.item_id == item_id,
            )
            .first()
        )

    def add(self, item_type: str, item_id: int) -> Favorite:
        """Favorite an item; adding an existing favorite returns the existing row"""
        existing = self._find(item_type, item_id)
        if existing is not None:
            return existing

        get_resource(self.db, item_type, item_id)
        favorite = Favorite(user_id=self.user_id, type=item_type, item_id=item_id)
        self.db.add(favorite)
        self.db.commit()
        self.db.refresh(favorite)
        logger.info(f"User {self.user_id} favorited {item_type}:{item_id}")
        return favorite

    def remove(self, item_type: str, item_id: int) -> None:
        favorite = self._find(item_type, item_id)
        if favorite is None:
            raise NotFoundError(f"{item_type.capitalize()} {item_id} is not in your favorites")

        self.db.delete(favorite)
        self.db.commit()
        logger.info(f"User {self.user_id} removed favorite {item_type}:{item_id}")

    def is_favorite(self, item_type: str, item_id: int) -> bool:
        return self._find(item_type, item_id) is not None

    def toggle(self, item_type: str, item_id: int) -> bool:
        """Flip the favorite state and return the new state"""
        if self.is_favorite(item_type, item_id):
            self.remove(item_type, item_id)
            return False
        self.add(item_type, item_id)
        return True

    def list(self, item_type: Optional[str] = None) -> List[Favorite]:
        query = self.db.query(Favorite).filter(Favorite.user_id == self.user_id)
        if item_type:
            query = query.filter(Favorite.type == item_type)
        return query.order_by(Favorite.created_at.desc(), Favorite.id.desc()).all()

    def grouped(self) -> Dict[str, List[int]]:
        """All favorites as {type: [item ids]}"""
        groups: Dict[str, List[int]] = {"artist": [], "event": [], "venue": [], "organiser": []}
        for favorite in self.list():
            groups.setdefault(favorite.type, []).append(favorite.item_id)
        return groups
