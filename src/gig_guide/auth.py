"""
Authentication utilities, JWT handling and role guards
"""
import hashlib
import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional, Union

import bcrypt
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext
from passlib.exc import MissingBackendError
from sqlalchemy.orm import Session

from .config import config
from .db import get_db, User
from .db.models import ROLE_ACL_IDS, UserRole
from .services.ownership import Principal

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = config.ACCESS_TOKEN_EXPIRE_MINUTES

# Each extra round doubles hashing time; tests run with the bcrypt minimum of 4
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=config.BCRYPT_ROUNDS,
)

http_bearer = HTTPBearer(auto_error=False)


def _prepare_password(password: str) -> bytes:
    """bcrypt only reads 72 bytes, so longer passwords are pre-hashed with SHA256"""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        return hashlib.sha256(password_bytes).hexdigest().encode("utf-8")
    return password_bytes


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    if not plain_password or not hashed_password:
        return False

    prepared = _prepare_password(plain_password)
    try:
        return pwd_context.verify(prepared, hashed_password)
    except (ValueError, AttributeError, MissingBackendError) as e:
        # passlib's bcrypt backend detection fails on newer bcrypt releases
        logger.debug(f"passlib verify unavailable ({type(e).__name__}), using bcrypt directly")
        if not hashed_password.startswith("$2"):
            return False
        return bcrypt.checkpw(prepared, hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash a password, handling bcrypt's 72-byte limit"""
    if not password:
        raise ValueError("Password cannot be empty")

    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_prepare_password(password), salt).decode("utf-8")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token

    Args:
        data: Claims to encode; must include 'sub' (user id as a string)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode.update({
        "exp": expire,
        "jti": str(uuid.uuid4()),
        "iat": now,
    })
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role})


def verify_token(token: str) -> Optional[dict]:
    """Verify and decode a JWT token; returns None when invalid or expired"""
    try:
        return jwt.decode(token, config.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Token verification failed: Token has expired")
        return None
    except JWTError as e:
        logger.warning(f"Token verification failed: {type(e).__name__} - {e}")
        return None


def get_auth_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer)
) -> Optional[str]:
    """
    Extract the token from the Authorization header, falling back to the
    auth_token cookie. Returns None if neither is present.
    """
    if credentials and credentials.credentials:
        return credentials.credentials.strip()

    cookie_token = request.cookies.get("auth_token")
    if cookie_token:
        logger.debug("Using token from auth_token cookie")
        return cookie_token.strip()
    return None


def _user_from_token(token: str, db: Session) -> User:
    payload = verify_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired authentication token. Please log in again.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.warning(f"Authentication failed: Invalid user ID in token: {payload.get('sub')}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token format: user identifier is not valid",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.warning(f"Authentication failed: User with ID {user_id} not found")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account not found. Please log in again.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        logger.warning(f"Authentication failed: User {user_id} account is inactive")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )
    return user


def get_current_user(
    token: Optional[str] = Depends(get_auth_token),
    db: Session = Depends(get_db)
) -> User:
    """Get the authenticated user; 401 when no valid token is supplied"""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token is missing. Please log in again.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _user_from_token(token, db)


def principal_for(user: User) -> Principal:
    """Build the ownership principal for a user, including linked profile ids"""
    return Principal(
        id=user.id,
        role=user.role,
        artist_id=user.artist.id if user.artist else None,
        organiser_id=user.organiser.id if user.organiser else None,
    )


def get_current_principal(user: User = Depends(get_current_user)) -> Principal:
    return principal_for(user)


def get_optional_principal(
    token: Optional[str] = Depends(get_auth_token),
    db: Session = Depends(get_db)
) -> Optional[Principal]:
    """Principal for public routes that personalise output; None when anonymous or the token is bad"""
    if not token:
        return None
    payload = verify_token(token)
    if payload is None:
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    user = db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
    return principal_for(user) if user else None


def _role_name(role: Union[str, int, UserRole]) -> str:
    if isinstance(role, UserRole):
        return role.value
    if isinstance(role, int):
        return ROLE_ACL_IDS[role].value
    return str(role)


def restrict_to(*roles: Union[str, int, UserRole]):
    """
    Dependency factory limiting a route to the given roles.

    Roles may be names ("admin"), UserRole members or legacy numeric ACL ids (2).
    """
    allowed = {_role_name(role) for role in roles}

    def _guard(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning(f"User {user.id} with role {user.role} denied; requires one of {sorted(allowed)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return user

    return _guard


require_admin = restrict_to(UserRole.SUPERUSER, UserRole.ADMIN)
