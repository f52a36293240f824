"""
Currency rate table routes.
"""
from fastapi import APIRouter, Depends
from typing import List, Optional
from together.models.user import User
from together.schemas.currency_rate import (
    ConvertRequest,
    ConvertResponse,
    CurrencyRateResponse,
    CurrencyRateUpsert,
)
from together.api.dependencies import get_current_user, get_rate_service
from together.services.fx_service import CurrencyRateService

router = APIRouter(prefix="/currency-rates", tags=["currency-rates"])


@router.get("", response_model=List[CurrencyRateResponse])
async def list_currency_rates(
    base: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    rates: CurrencyRateService = Depends(get_rate_service)
):
    """List stored rates, optionally for one base currency."""
    return rates.list_rates(base)


@router.get("/{base}/{target}", response_model=CurrencyRateResponse)
async def get_currency_rate(
    base: str,
    target: str,
    current_user: User = Depends(get_current_user),
    rates: CurrencyRateService = Depends(get_rate_service)
):
    """Get the stored rate for one pair."""
    return rates.get_rate(base, target)


@router.put("", response_model=CurrencyRateResponse)
async def upsert_currency_rate(
    rate_data: CurrencyRateUpsert,
    current_user: User = Depends(get_current_user),
    rates: CurrencyRateService = Depends(get_rate_service)
):
    """Create or replace the rate for a pair."""
    return rates.upsert_rate(rate_data.base_currency, rate_data.target_currency, rate_data.rate)


@router.post("/convert", response_model=ConvertResponse)
async def convert_amount(
    request: ConvertRequest,
    current_user: User = Depends(get_current_user),
    rates: CurrencyRateService = Depends(get_rate_service)
):
    """Convert an amount with the stored rate (identity when the pair is missing)."""
    result = rates.convert(request.amount, request.from_currency, request.to_currency)
    return ConvertResponse(
        amount=result.amount,
        from_currency=result.from_currency,
        to_currency=result.to_currency,
        rate=result.rate,
        converted=result.converted,
        rate_found=result.rate_found,
        last_updated=result.last_updated
    )
