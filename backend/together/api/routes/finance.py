"""
Finance transaction and summary routes.
"""
from fastapi import APIRouter, Depends, Response, status
from typing import List, Optional
from datetime import datetime
from together.models.user import User
from together.schemas.transaction import TransactionCreate, TransactionResponse, SummaryResponse
from together.api.dependencies import get_current_user, get_transaction_store, get_summary_engine
from together.services.finance_service import SummaryEngine, TransactionStore

router = APIRouter(prefix="/finance", tags=["finance"])


@router.get("/transactions", response_model=List[TransactionResponse])
async def list_transactions(
    person: str = "both",
    currency: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    page: int = 1,
    limit: Optional[int] = None,
    current_user: User = Depends(get_current_user),
    store: TransactionStore = Depends(get_transaction_store),
    engine: SummaryEngine = Depends(get_summary_engine)
):
    """
    List transactions newest first.

    With `currency` set, every item also carries its amount converted into
    that display currency. `page` and `limit` select one page of the list.
    """
    records = store.list_transactions(
        current_user.id,
        person=person,
        start_date=start_date,
        end_date=end_date,
        type=type,
        category=category,
        page=page,
        limit=limit
    )

    if not currency:
        return [TransactionResponse.model_validate(record) for record in records]

    responses = []
    for item in engine.convert_transactions(records, currency):
        response = TransactionResponse.model_validate(item.transaction)
        response.converted_amount = item.converted_amount
        response.display_currency = item.display_currency
        responses.append(response)
    return responses


@router.post("/transactions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    current_user: User = Depends(get_current_user),
    store: TransactionStore = Depends(get_transaction_store)
):
    """Record an income, expense or savings entry for one person."""
    return store.create_transaction(
        current_user.id,
        person=transaction_data.person,
        title=transaction_data.title,
        amount=transaction_data.amount,
        type=transaction_data.type,
        category=transaction_data.category,
        date=transaction_data.date,
        currency=transaction_data.currency
    )


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: int,
    current_user: User = Depends(get_current_user),
    store: TransactionStore = Depends(get_transaction_store)
):
    """Delete a transaction."""
    store.delete_transaction(current_user.id, transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    person: str = "both",
    currency: str = "USD",
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    current_user: User = Depends(get_current_user),
    engine: SummaryEngine = Depends(get_summary_engine)
):
    """Income, expense and savings totals plus balance in one display currency."""
    return engine.compute_summary(
        current_user.id,
        person=person,
        display_currency=currency,
        start_date=start_date,
        end_date=end_date
    )
