"""
Authentication routes for signup and login.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from together.db.session import get_db
from together.schemas.user import UserCreate, UserLogin, Token, UserResponse
from together.models.user import User
from together.core.exceptions import AuthError, ValidationError
from together.core.security import verify_password, get_password_hash, create_access_token
from together.api.dependencies import get_person_registry
from together.services.person_service import PersonRegistry
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    persons: PersonRegistry = Depends(get_person_registry)
):
    """Register a new account and create its two person slots."""
    existing_user = db.query(User).filter(User.username == user_data.username).first()
    if existing_user:
        raise ValidationError("Username already exists")

    existing_email = db.query(User).filter(User.email == user_data.email).first()
    if existing_email:
        raise ValidationError("Email already exists")

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password)
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    persons.ensure_initialized(new_user.id)
    logger.info(f"Registered account {new_user.id} ({new_user.username})")

    return new_user


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    persons: PersonRegistry = Depends(get_person_registry)
):
    """Login and get JWT token."""
    user = db.query(User).filter(User.username == credentials.username).first()

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise AuthError("Incorrect username or password")

    if not user.is_active:
        raise AuthError("User account is inactive", status_code=403)

    # Accounts created before the person registry existed get their slots here
    persons.ensure_initialized(user.id)

    access_token = create_access_token(data={"sub": user.username, "user_id": user.id})
    return {"access_token": access_token, "token_type": "bearer"}
