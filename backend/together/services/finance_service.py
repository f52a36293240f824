"""
Finance service: the transaction store and the summary engine.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Union

from together.core.exceptions import NotFoundError, ValidationError
from together.core.validation import (
    BOTH_PERSONS,
    normalize_currency,
    parse_amount,
    parse_person_filter,
    parse_person_key,
    parse_timestamp,
    parse_transaction_type,
    require_text,
    round_money,
)
from together.models.person import PersonKey
from together.models.transaction import TransactionType
from together.repositories.base import (
    NewTransaction,
    RateRepository,
    TransactionRecord,
    TransactionRepository,
)
from together.services.fx_service import CurrencyConverter
from together.services.person_service import PersonRegistry

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500


def _date_range(start_date, end_date):
    start_date = parse_timestamp(start_date, "start_date") if start_date is not None else None
    end_date = parse_timestamp(end_date, "end_date") if end_date is not None else None
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must not be after end_date")
    return start_date, end_date


class TransactionStore:
    """Create, delete and list finance entries scoped to an account."""

    def __init__(self, repository: TransactionRepository, persons: PersonRegistry):
        self.repository = repository
        self.persons = persons

    def create_transaction(
        self,
        account_id: int,
        person: Union[str, PersonKey],
        title: str,
        amount,
        type: Union[str, TransactionType],
        category: str,
        date: datetime,
        currency: Optional[str] = None,
    ) -> TransactionRecord:
        """
        Validate and store a new transaction.

        The currency defaults to the person's currency preference. Nothing
        is written unless every field is valid.
        """
        person_key = parse_person_key(person)
        transaction_type = parse_transaction_type(type)
        value = parse_amount(amount)
        title = require_text(title, "title", 255)
        category = require_text(category, "category", 100)
        date = parse_timestamp(date)

        if currency is None or (isinstance(currency, str) and not currency.strip()):
            currency = self.persons.get_person(account_id, person_key).currency_preference
        else:
            currency = normalize_currency(currency)
            # Person must still exist even when the currency is explicit
            self.persons.get_person(account_id, person_key)

        record = self.repository.add(NewTransaction(
            account_id=account_id,
            person=person_key,
            title=title,
            amount=value,
            currency=currency,
            type=transaction_type,
            category=category,
            date=date,
        ))
        logger.info(
            f"Created {record.type.value} transaction {record.id} for {record.person.value} "
            f"({record.amount} {record.currency}) on account {account_id}"
        )
        return record

    def delete_transaction(self, account_id: int, transaction_id: int) -> None:
        if not self.repository.delete(account_id, transaction_id):
            raise NotFoundError(f"Finance transaction {transaction_id} not found")
        logger.info(f"Deleted transaction {transaction_id} on account {account_id}")

    def list_transactions(
        self,
        account_id: int,
        person: Optional[Union[str, PersonKey]] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        type: Optional[Union[str, TransactionType]] = None,
        category: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> List[TransactionRecord]:
        """
        List transactions newest first; person None or 'both' returns both slots.

        With `limit` set, returns page `page` (1-based) of that size.
        """
        if page < 1:
            raise ValidationError("page must be at least 1")
        if limit is not None and not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        person_key = parse_person_filter(person)
        transaction_type = parse_transaction_type(type) if type else None
        start_date, end_date = _date_range(start_date, end_date)
        return self.repository.list(
            account_id,
            person=person_key,
            start_date=start_date,
            end_date=end_date,
            type=transaction_type,
            category=category.strip() if category else None,
            offset=(page - 1) * limit if limit is not None else 0,
            limit=limit,
        )


@dataclass
class TypeTotal:
    """Running total for one transaction type in the display currency."""
    currency: str
    total: Decimal = Decimal(0)
    count: int = 0


@dataclass
class Summary:
    """Aggregated totals for a person (or both) in one display currency."""
    person: str
    currency: str
    income: TypeTotal
    expense: TypeTotal
    savings: TypeTotal
    balance: Decimal
    missing_rates: List[str] = field(default_factory=list)


@dataclass
class ConvertedTransaction:
    """A stored transaction with its amount in a display currency."""
    transaction: TransactionRecord
    converted_amount: Decimal
    display_currency: str


class SummaryEngine:
    """
    Read-side aggregation over the transaction store.

    Every call recomputes from the live transaction list; nothing is cached
    between calls and the store is never written.
    """

    def __init__(self, transactions: TransactionRepository, rates: RateRepository):
        self.transactions = transactions
        self.rates = rates

    def compute_summary(
        self,
        account_id: int,
        person: Optional[Union[str, PersonKey]] = None,
        display_currency: str = "USD",
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Summary:
        currency = normalize_currency(display_currency, "currency")
        person_key = parse_person_filter(person)
        start_date, end_date = _date_range(start_date, end_date)

        rows = self.transactions.list(
            account_id, person=person_key, start_date=start_date, end_date=end_date
        )
        converter = CurrencyConverter(self.rates)
        totals: Dict[TransactionType, TypeTotal] = {
            transaction_type: TypeTotal(currency=currency) for transaction_type in TransactionType
        }

        for row in rows:
            bucket = totals[row.type]
            bucket.total += converter.convert(row.amount, row.currency, currency).converted
            bucket.count += 1

        for bucket in totals.values():
            bucket.total = round_money(bucket.total)

        income = totals[TransactionType.INCOME]
        expense = totals[TransactionType.EXPENSE]
        missing = sorted(f"{base}->{target}" for base, target in converter.missing_pairs)

        return Summary(
            person=person_key.value if person_key else BOTH_PERSONS,
            currency=currency,
            income=income,
            expense=expense,
            savings=totals[TransactionType.SAVINGS],
            balance=income.total - expense.total,
            missing_rates=missing,
        )

    def convert_transactions(
        self,
        records: List[TransactionRecord],
        display_currency: str,
    ) -> List[ConvertedTransaction]:
        """Attach display-currency amounts to already listed transactions."""
        currency = normalize_currency(display_currency, "currency")
        converter = CurrencyConverter(self.rates)
        return [
            ConvertedTransaction(
                transaction=record,
                converted_amount=converter.convert(record.amount, record.currency, currency).converted,
                display_currency=currency,
            )
            for record in records
        ]
