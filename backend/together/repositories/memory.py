"""
In-memory store implementations.

Each instance owns its own state; nothing here is module-global, so two
stores never see each other's data.
"""
import itertools
import threading
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from together.models.person import PersonKey
from together.models.transaction import TransactionType
from together.repositories.base import (
    NewTransaction,
    PersonRecord,
    PersonRepository,
    RateRecord,
    RateRepository,
    TransactionRecord,
    TransactionRepository,
)


def _now() -> datetime:
    return datetime.utcnow()


class InMemoryPersonRepository(PersonRepository):
    def __init__(self):
        self._rows: Dict[Tuple[int, PersonKey], PersonRecord] = {}
        self._lock = threading.Lock()

    def list_for_account(self, account_id: int) -> List[PersonRecord]:
        return sorted(
            (row for (owner, _), row in self._rows.items() if owner == account_id),
            key=lambda row: row.person_key.value,
        )

    def get(self, account_id: int, person_key: PersonKey) -> Optional[PersonRecord]:
        return self._rows.get((account_id, person_key))

    def add_if_missing(self, account_id: int, person_key: PersonKey, name: str, currency_preference: str) -> bool:
        with self._lock:
            if (account_id, person_key) in self._rows:
                return False
            now = _now()
            self._rows[(account_id, person_key)] = PersonRecord(
                account_id=account_id,
                person_key=person_key,
                name=name,
                currency_preference=currency_preference,
                created_at=now,
                updated_at=now,
            )
            return True

    def update(self, account_id, person_key, name=None, currency_preference=None):
        with self._lock:
            row = self._rows.get((account_id, person_key))
            if row is None:
                return None
            changes = {"updated_at": _now()}
            if name is not None:
                changes["name"] = name
            if currency_preference is not None:
                changes["currency_preference"] = currency_preference
            row = replace(row, **changes)
            self._rows[(account_id, person_key)] = row
            return row


class InMemoryTransactionRepository(TransactionRepository):
    def __init__(self):
        self._rows: Dict[int, TransactionRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add(self, transaction: NewTransaction) -> TransactionRecord:
        with self._lock:
            now = _now()
            record = TransactionRecord(
                id=next(self._ids),
                account_id=transaction.account_id,
                person=transaction.person,
                title=transaction.title,
                amount=transaction.amount,
                currency=transaction.currency,
                type=transaction.type,
                category=transaction.category,
                date=transaction.date,
                created_at=now,
                updated_at=now,
            )
            self._rows[record.id] = record
            return record

    def get(self, account_id: int, transaction_id: int) -> Optional[TransactionRecord]:
        row = self._rows.get(transaction_id)
        if row is None or row.account_id != account_id:
            return None
        return row

    def delete(self, account_id: int, transaction_id: int) -> bool:
        with self._lock:
            if self.get(account_id, transaction_id) is None:
                return False
            del self._rows[transaction_id]
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
        rows = [
            row for row in self._rows.values()
            if row.account_id == account_id
            and (person is None or row.person == person)
            and (start_date is None or row.date >= start_date)
            and (end_date is None or row.date <= end_date)
            and (type is None or row.type == type)
            and (category is None or row.category == category)
        ]
        rows.sort(key=lambda row: (row.date, row.id), reverse=True)
        end = offset + limit if limit is not None else None
        return rows[offset:end]


class InMemoryRateRepository(RateRepository):
    def __init__(self):
        self._rows: Dict[Tuple[str, str], RateRecord] = {}

    def get(self, base_currency: str, target_currency: str) -> Optional[RateRecord]:
        return self._rows.get((base_currency, target_currency))

    def list(self, base_currency: Optional[str] = None) -> List[RateRecord]:
        return [
            self._rows[pair] for pair in sorted(self._rows)
            if base_currency is None or pair[0] == base_currency
        ]

    def upsert(self, base_currency: str, target_currency: str, rate: Decimal) -> RateRecord:
        record = RateRecord(
            base_currency=base_currency,
            target_currency=target_currency,
            rate=rate,
            last_updated=_now(),
        )
        self._rows[(base_currency, target_currency)] = record
        return record
