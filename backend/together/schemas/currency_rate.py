"""
Pydantic schemas for CurrencyRate entity.
"""
from pydantic import BaseModel, Field
from typing import Optional, Union
from datetime import datetime
from decimal import Decimal


class CurrencyRateBase(BaseModel):
    """Base currency rate schema."""
    base_currency: str
    target_currency: str
    rate: Decimal  # 1 base_currency = rate target_currency


class CurrencyRateUpsert(CurrencyRateBase):
    """Schema for creating or replacing a rate."""


class CurrencyRateResponse(CurrencyRateBase):
    """Schema for currency rate response."""
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True


class ConvertRequest(BaseModel):
    """Schema for an ad-hoc conversion."""
    amount: Union[Decimal, str]
    from_currency: str = Field(alias="from")
    to_currency: str = Field(alias="to")


class ConvertResponse(BaseModel):
    """Schema for conversion result."""
    model_config = {"populate_by_name": True}

    amount: Decimal
    from_currency: str = Field(alias="from")
    to_currency: str = Field(alias="to")
    rate: Decimal
    converted: Decimal
    rate_found: bool  # False means no stored rate and the identity rate was used
    last_updated: Optional[datetime] = None
