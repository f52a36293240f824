"""
Person model for the two partner slots of an account.
"""
from sqlalchemy import Column, String, ForeignKey, Integer, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from together.db.base import BaseModel
import enum


class PersonKey(str, enum.Enum):
    """Person slot enumeration."""
    PERSON1 = "person1"
    PERSON2 = "person2"


DEFAULT_PERSON_NAMES = {
    PersonKey.PERSON1: "Person 1",
    PersonKey.PERSON2: "Person 2",
}


class Person(BaseModel):
    """One of the two named person slots of an account."""
    __tablename__ = "persons"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    person_key = Column(String(20), nullable=False)
    name = Column(String(100), nullable=False, default="Person")
    currency_preference = Column(String(3), nullable=False, default="USD")

    # Relationships
    user = relationship("User", back_populates="persons")

    # One row per slot per account; also the only guard for concurrent initialization
    __table_args__ = (
        UniqueConstraint('user_id', 'person_key', name='uq_persons_user_person_key'),
        CheckConstraint("person_key IN ('person1', 'person2')", name='ck_persons_person_key'),
    )
