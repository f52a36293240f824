"""
User management routes.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from together.db.session import get_db
from together.schemas.user import UserResponse
from together.models.user import User
from together.api.dependencies import get_current_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return current_user


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_current_user(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete the account together with its persons and finance entries."""
    user_id = current_user.id
    db.delete(current_user)
    db.commit()
    logger.info(f"Deleted account {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
