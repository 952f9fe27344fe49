"""
Ownership resolution

Resources point at whoever controls them through an (owner_type, owner_id)
pair. A principal owns a resource when its role-specific id matches:

    owner_type "artist"     -> principal is an artist and artist_id == owner_id
    owner_type "organiser"  -> principal is an organiser and organiser_id == owner_id
    owner_type "user"       -> principal.id == owner_id

Anything else (including "unclaimed") has no owner. Admins are not owners;
``can_modify`` grants them write access on top of ownership.
"""
from dataclasses import dataclass
from typing import Any, Optional, Tuple

ADMIN_ROLES = frozenset({"superuser", "admin"})


@dataclass(frozen=True)
class Principal:
    """The authenticated caller as seen by ownership checks"""
    id: Optional[int]
    role: str
    artist_id: Optional[int] = None
    organiser_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


def _same_id(left: Any, right: Any) -> bool:
    """Compare ids as strings so 7 and "7" match; a missing id never matches"""
    if left is None or right is None:
        return False
    left, right = str(left).strip(), str(right).strip()
    return bool(left) and left == right


def is_owner(principal: Optional[Principal], owner_type: Optional[str], owner_id: Any) -> bool:
    if principal is None or not owner_type:
        return False

    if owner_type == "artist":
        return principal.role == "artist" and _same_id(principal.artist_id, owner_id)
    if owner_type == "organiser":
        return principal.role == "organiser" and _same_id(principal.organiser_id, owner_id)
    if owner_type == "user":
        return _same_id(principal.id, owner_id)
    return False


def owns(principal: Optional[Principal], resource: Any) -> bool:
    """is_owner for any object exposing owner_type and owner_id"""
    return is_owner(principal, getattr(resource, "owner_type", None), getattr(resource, "owner_id", None))


def can_modify(principal: Optional[Principal], resource: Any) -> bool:
    """Write policy for mutating routes: the owner, or an admin/superuser"""
    if principal is None:
        return False
    return principal.is_admin or owns(principal, resource)


def owner_identity(principal: Principal) -> Tuple[str, Optional[int]]:
    """The (owner_type, owner_id) a principal creates resources as"""
    if principal.role == "artist" and principal.artist_id is not None:
        return "artist", principal.artist_id
    if principal.role == "organiser" and principal.organiser_id is not None:
        return "organiser", principal.organiser_id
    return "user", principal.id
