"""
Currency rate model for converting stored amounts into a display currency.
"""
from sqlalchemy import Column, String, Numeric, DateTime, Integer, UniqueConstraint, CheckConstraint, func
from together.db.base import Base


class CurrencyRate(Base):
    """Conversion rate for one currency pair (1 base = rate target)."""
    __tablename__ = "currency_rates"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    base_currency = Column(String(3), nullable=False)
    target_currency = Column(String(3), nullable=False)
    rate = Column(Numeric(15, 6), nullable=False)
    last_updated = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('base_currency', 'target_currency', name='uq_currency_rates_pair'),
        CheckConstraint("rate > 0", name='ck_currency_rates_rate_positive'),
    )
