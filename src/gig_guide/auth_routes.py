"""
Authentication API routes
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from .auth import create_user_token, get_current_user, get_password_hash, verify_password
from .db import get_db, User
from .schemas import UserSignup
from .serializers import user_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])


def _token_response(user: User) -> dict:
    return {
        "access_token": create_user_token(user),
        "token_type": "bearer",
        "user": user_to_dict(user),
    }


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(user_data: UserSignup, db: Session = Depends(get_db)):
    """Register a new account. Admin roles are never self-assigned."""
    email = user_data.email.lower()
    logger.info(f"Signup attempt for email: {email}")

    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    if user_data.username and db.query(User).filter(User.username == user_data.username).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")

    new_user = User(
        email=email,
        username=user_data.username,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
        is_active=True,
        email_verified=False,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"User created successfully with ID: {new_user.id} (role={new_user.role})")

    return _token_response(new_user)


@router.post("/login")
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """Login with email (or username) and password"""
    identifier = form_data.username.strip()
    user = (
        db.query(User)
        .filter((User.email == identifier.lower()) | (User.username == identifier))
        .first()
    )

    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

    return _token_response(user)


@router.get("/me")
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information"""
    return user_to_dict(current_user)


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    """Logout user (stateless JWT; the client discards its token)"""
    return {"message": "Logged out successfully"}
