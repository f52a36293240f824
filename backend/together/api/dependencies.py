"""
Shared FastAPI dependencies: current user and service wiring.
"""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
from together.core.exceptions import AuthError
from together.core.security import decode_access_token
from together.db.session import get_db
from together.models.user import User
from together.repositories.sql import SqlPersonRepository, SqlRateRepository, SqlTransactionRepository
from together.services.finance_service import SummaryEngine, TransactionStore
from together.services.fx_service import CurrencyRateService
from together.services.person_service import PersonRegistry

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the account behind the bearer token."""
    if credentials is None:
        raise AuthError("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if not payload or "user_id" not in payload:
        raise AuthError("Invalid or expired token")

    user = db.query(User).filter(User.id == payload["user_id"]).first()
    if not user:
        raise AuthError("User not found")
    if not user.is_active:
        raise AuthError("User account is inactive", status_code=403)
    return user


def get_person_registry(db: Session = Depends(get_db)) -> PersonRegistry:
    return PersonRegistry(SqlPersonRepository(db))


def get_transaction_store(db: Session = Depends(get_db)) -> TransactionStore:
    return TransactionStore(SqlTransactionRepository(db), PersonRegistry(SqlPersonRepository(db)))


def get_summary_engine(db: Session = Depends(get_db)) -> SummaryEngine:
    return SummaryEngine(SqlTransactionRepository(db), SqlRateRepository(db))


def get_rate_service(db: Session = Depends(get_db)) -> CurrencyRateService:
    return CurrencyRateService(SqlRateRepository(db))
