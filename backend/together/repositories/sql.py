"""
SQLAlchemy store implementations backed by a request-scoped Session.

Every write commits, so one repository call is one atomic unit against the database.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from together.models.currency_rate import CurrencyRate
from together.models.person import Person, PersonKey
from together.models.transaction import FinanceTransaction, TransactionType
from together.repositories.base import (
    NewTransaction,
    PersonRecord,
    PersonRepository,
    RateRecord,
    RateRepository,
    TransactionRecord,
    TransactionRepository,
)

logger = logging.getLogger(__name__)


def _person_record(row: Person) -> PersonRecord:
    return PersonRecord(
        account_id=row.user_id,
        person_key=PersonKey(row.person_key),
        name=row.name,
        currency_preference=row.currency_preference,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _transaction_record(row: FinanceTransaction) -> TransactionRecord:
    return TransactionRecord(
        id=row.id,
        account_id=row.user_id,
        person=PersonKey(row.person),
        title=row.title,
        amount=Decimal(row.amount),
        currency=row.currency,
        type=TransactionType(row.type),
        category=row.category,
        date=row.date,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _rate_record(row: CurrencyRate) -> RateRecord:
    return RateRecord(
        base_currency=row.base_currency,
        target_currency=row.target_currency,
        rate=Decimal(row.rate),
        last_updated=row.last_updated,
    )


class SqlPersonRepository(PersonRepository):
    def __init__(self, db: Session):
        self.db = db

    def _row(self, account_id: int, person_key: PersonKey) -> Optional[Person]:
        return self.db.query(Person).filter(
            Person.user_id == account_id,
            Person.person_key == person_key.value
        ).first()

    def list_for_account(self, account_id: int) -> List[PersonRecord]:
        rows = self.db.query(Person).filter(
            Person.user_id == account_id
        ).order_by(Person.person_key).all()
        return [_person_record(row) for row in rows]

    def get(self, account_id: int, person_key: PersonKey) -> Optional[PersonRecord]:
        row = self._row(account_id, person_key)
        return _person_record(row) if row else None

    def add_if_missing(self, account_id: int, person_key: PersonKey, name: str, currency_preference: str) -> bool:
        if self._row(account_id, person_key) is not None:
            return False

        self.db.add(Person(
            user_id=account_id,
            person_key=person_key.value,
            name=name,
            currency_preference=currency_preference
        ))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self._row(account_id, person_key) is None:
                # Not a uniqueness race: some other constraint rejected the row
                raise
            logger.info(f"Person slot {person_key.value} for account {account_id} was created concurrently")
            return False
        return True

    def update(self, account_id, person_key, name=None, currency_preference=None):
        row = self._row(account_id, person_key)
        if row is None:
            return None

        if name is not None:
            row.name = name
        if currency_preference is not None:
            row.currency_preference = currency_preference
        self.db.commit()
        self.db.refresh(row)
        return _person_record(row)


class SqlTransactionRepository(TransactionRepository):
    def __init__(self, db: Session):
        self.db = db

    def _row(self, account_id: int, transaction_id: int) -> Optional[FinanceTransaction]:
        return self.db.query(FinanceTransaction).filter(
            FinanceTransaction.id == transaction_id,
            FinanceTransaction.user_id == account_id
        ).first()

    def add(self, transaction: NewTransaction) -> TransactionRecord:
        row = FinanceTransaction(
            user_id=transaction.account_id,
            person=transaction.person.value,
            title=transaction.title,
            amount=transaction.amount,
            currency=transaction.currency,
            type=transaction.type.value,
            category=transaction.category,
            date=transaction.date
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return _transaction_record(row)

    def get(self, account_id: int, transaction_id: int) -> Optional[TransactionRecord]:
        row = self._row(account_id, transaction_id)
        return _transaction_record(row) if row else None

    def delete(self, account_id: int, transaction_id: int) -> bool:
        row = self._row(account_id, transaction_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def list(
        self,
        account_id: int,
        person: Optional[PersonKey] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[TransactionRecord]:
        query = self.db.query(FinanceTransaction).filter(FinanceTransaction.user_id == account_id)

        if person is not None:
            query = query.filter(FinanceTransaction.person == person.value)
        if start_date is not None:
            query = query.filter(FinanceTransaction.date >= start_date)
        if end_date is not None:
            query = query.filter(FinanceTransaction.date <= end_date)
        if type is not None:
            query = query.filter(FinanceTransaction.type == type.value)
        if category is not None:
            query = query.filter(FinanceTransaction.category == category)

        query = query.order_by(FinanceTransaction.date.desc(), FinanceTransaction.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        rows = query.all()
        return [_transaction_record(row) for row in rows]


class SqlRateRepository(RateRepository):
    def __init__(self, db: Session):
        self.db = db

    def _row(self, base_currency: str, target_currency: str) -> Optional[CurrencyRate]:
        return self.db.query(CurrencyRate).filter(
            CurrencyRate.base_currency == base_currency,
            CurrencyRate.target_currency == target_currency
        ).first()

    def get(self, base_currency: str, target_currency: str) -> Optional[RateRecord]:
        row = self._row(base_currency, target_currency)
        return _rate_record(row) if row else None

    def list(self, base_currency: Optional[str] = None) -> List[RateRecord]:
        query = self.db.query(CurrencyRate)
        if base_currency is not None:
            query = query.filter(CurrencyRate.base_currency == base_currency)
        rows = query.order_by(CurrencyRate.base_currency, CurrencyRate.target_currency).all()
        return [_rate_record(row) for row in rows]

    def upsert(self, base_currency: str, target_currency: str, rate: Decimal) -> RateRecord:
        row = self._row(base_currency, target_currency)
        if row is None:
            row = CurrencyRate(
                base_currency=base_currency,
                target_currency=target_currency,
                rate=rate
            )
            self.db.add(row)
        else:
            row.rate = rate
            row.last_updated = func.now()

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            row = self._row(base_currency, target_currency)
            if row is None:
                # Not a lost insert race for the pair, so there is nothing to update
                raise
            row.rate = rate
            row.last_updated = func.now()
            self.db.commit()

        self.db.refresh(row)
        return _rate_record(row)
