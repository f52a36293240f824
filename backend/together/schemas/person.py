"""
Pydantic schemas for Person entity.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from together.models.person import PersonKey


class PersonUpdate(BaseModel):
    """Schema for a partial person update."""
    name: Optional[str] = None
    currency_preference: Optional[str] = None


class PersonResponse(BaseModel):
    """Schema for person response."""
    person_key: PersonKey
    name: str
    currency_preference: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PersonsResponse(BaseModel):
    """Both person slots of an account."""
    person1: PersonResponse
    person2: PersonResponse
