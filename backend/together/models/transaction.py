"""
Finance transaction model for the two-person ledger.
"""
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Integer, Index, CheckConstraint
from sqlalchemy.orm import relationship
from together.db.base import BaseModel
import enum


class TransactionType(str, enum.Enum):
    """Transaction type enumeration."""
    INCOME = "income"
    EXPENSE = "expense"
    SAVINGS = "savings"


class FinanceTransaction(BaseModel):
    """Income, expense or savings entry attributed to one person slot."""
    __tablename__ = "finance"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    person = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    type = Column(String(20), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)  # When it happened, not when it was recorded

    # Relationships
    user = relationship("User", back_populates="transactions")

    __table_args__ = (
        CheckConstraint("person IN ('person1', 'person2')", name='ck_finance_person'),
        CheckConstraint("type IN ('income', 'expense', 'savings')", name='ck_finance_type'),
        CheckConstraint("amount > 0", name='ck_finance_amount_positive'),
        Index('idx_finance_user_person', 'user_id', 'person'),
    )
