"""
Abstract store interfaces for the finance ledger.

The services only ever talk to these interfaces. The SQLAlchemy
implementation backs the API; the in-memory implementation backs
service-level tests and any offline/demo wiring, and either can be
substituted without touching call sites.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from together.models.person import PersonKey
from together.models.transaction import TransactionType


@dataclass(frozen=True)
class PersonRecord:
    """A person slot as seen by the services."""
    account_id: int
    person_key: PersonKey
    name: str
    currency_preference: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewTransaction:
    """Validated input for a transaction insert."""
    account_id: int
    person: PersonKey
    title: str
    amount: Decimal
    currency: str
    type: TransactionType
    category: str
    date: datetime


@dataclass(frozen=True)
class TransactionRecord:
    """A stored finance transaction."""
    id: int
    account_id: int
    person: PersonKey
    title: str
    amount: Decimal
    currency: str
    type: TransactionType
    category: str
    date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class RateRecord:
    """A stored conversion rate (1 base = rate target)."""
    base_currency: str
    target_currency: str
    rate: Decimal
    last_updated: Optional[datetime] = None


class PersonRepository(ABC):
    """Storage for person slots."""

    @abstractmethod
    def list_for_account(self, account_id: int) -> List[PersonRecord]:
        """Return the existing person slots of an account (0, 1 or 2)."""

    @abstractmethod
    def get(self, account_id: int, person_key: PersonKey) -> Optional[PersonRecord]:
        """Return one slot, or None if it does not exist."""

    @abstractmethod
    def add_if_missing(self, account_id: int, person_key: PersonKey, name: str, currency_preference: str) -> bool:
        """
        Insert a slot unless one already exists.

        Returns:
            True if this call created the row, False if it was already present
            (including when a concurrent insert won the uniqueness race).
        """

    @abstractmethod
    def update(
        self,
        account_id: int,
        person_key: PersonKey,
        name: Optional[str] = None,
        currency_preference: Optional[str] = None,
    ) -> Optional[PersonRecord]:
        """Apply a partial update; None if the slot does not exist."""


class TransactionRepository(ABC):
    """Storage for finance transactions."""

    @abstractmethod
    def add(self, transaction: NewTransaction) -> TransactionRecord:
        """Insert a transaction and return it with id and timestamps assigned."""

    @abstractmethod
    def get(self, account_id: int, transaction_id: int) -> Optional[TransactionRecord]:
        """Return a transaction owned by the account, or None."""

    @abstractmethod
    def delete(self, account_id: int, transaction_id: int) -> bool:
        """Hard-delete a transaction owned by the account; False if no such row."""

    @abstractmethod
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
        """
        List transactions, newest `date` first (ties: highest id first).

        Args:
            person: Restrict to one slot; None means both
            start_date: Inclusive lower bound on `date`
            end_date: Inclusive upper bound on `date`
            type: Restrict to one transaction type
            category: Exact category match
            offset: Number of ordered rows to skip
            limit: Maximum number of rows; None returns all
        """


class RateRepository(ABC):
    """Storage for currency conversion rates."""

    @abstractmethod
    def get(self, base_currency: str, target_currency: str) -> Optional[RateRecord]:
        """Return the rate row for the pair, or None."""

    @abstractmethod
    def list(self, base_currency: Optional[str] = None) -> List[RateRecord]:
        """Return rate rows ordered by base then target currency."""

    @abstractmethod
    def upsert(self, base_currency: str, target_currency: str, rate: Decimal) -> RateRecord:
        """Insert or replace the rate for the pair and stamp last_updated."""
