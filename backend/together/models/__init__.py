"""Models package - Import all models for SQLAlchemy registration."""
from together.models.user import User
from together.models.person import Person, PersonKey
from together.models.transaction import FinanceTransaction, TransactionType
from together.models.currency_rate import CurrencyRate

__all__ = [
    "User",
    "Person",
    "PersonKey",
    "FinanceTransaction",
    "TransactionType",
    "CurrencyRate",
]
