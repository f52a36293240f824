"""
User model for authentication and account ownership.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from together.db.base import BaseModel


class User(BaseModel):
    """Account owning exactly two person slots and their finance entries."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    persons = relationship("Person", back_populates="user", cascade="all, delete-orphan")
    transactions = relationship("FinanceTransaction", back_populates="user", cascade="all, delete-orphan")
