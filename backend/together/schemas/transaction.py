"""
Pydantic schemas for finance transactions and summaries.
"""
from pydantic import BaseModel
from typing import List, Optional, Union
from datetime import datetime
from decimal import Decimal
from together.models.person import PersonKey
from together.models.transaction import TransactionType


class TransactionCreate(BaseModel):
    """
    Schema for transaction creation.

    person/type stay plain strings here; the transaction store parses them
    so invalid values surface as a ValidationError with a useful message.
    """
    person: str
    title: str
    amount: Union[Decimal, str]
    currency: Optional[str] = None  # Defaults to the person's currency preference
    type: str
    category: str
    date: datetime


class TransactionResponse(BaseModel):
    """Schema for transaction response."""
    id: int
    person: PersonKey
    title: str
    amount: Decimal
    currency: str
    type: TransactionType
    category: str
    date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Only set when a display currency was requested
    converted_amount: Optional[Decimal] = None
    display_currency: Optional[str] = None

    class Config:
        from_attributes = True


class TypeTotalResponse(BaseModel):
    """Total and count for one transaction type."""
    total: Decimal
    count: int
    currency: str

    class Config:
        from_attributes = True


class SummaryResponse(BaseModel):
    """Schema for finance summary response."""
    person: str  # person1, person2 or both
    currency: str
    income: TypeTotalResponse
    expense: TypeTotalResponse
    savings: TypeTotalResponse
    balance: Decimal  # income - expense; savings are not deducted
    missing_rates: List[str] = []  # Pairs converted at rate 1 for lack of a stored rate

    class Config:
        from_attributes = True
