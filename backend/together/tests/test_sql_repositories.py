"""
Tests for the SQLAlchemy repositories.
"""
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from together.models.currency_rate import CurrencyRate
from together.models.person import Person, PersonKey
from together.models.transaction import TransactionType
from together.models.user import User
from together.repositories.base import NewTransaction
from together.repositories.sql import SqlPersonRepository, SqlRateRepository, SqlTransactionRepository


def make_user(db_session, username="casey"):
    user = User(username=username, email=f"{username}@example.com", hashed_password="x")
    db_session.add(user)
    db_session.commit()
    return user


def test_add_if_missing_survives_lost_insert_race(db_session):
    user = make_user(db_session)
    repository = SqlPersonRepository(db_session)
    assert repository.add_if_missing(user.id, PersonKey.PERSON1, "Person 1", "USD") is True

    class RacingRepository(SqlPersonRepository):
        # First existence check ran before the other insert committed
        stale_checks = 1

        def _row(self, account_id, person_key):
            if self.stale_checks:
                self.stale_checks -= 1
                return None
            return super()._row(account_id, person_key)

    racing = RacingRepository(db_session)
    assert racing.add_if_missing(user.id, PersonKey.PERSON1, "Person 1", "USD") is False
    assert db_session.query(Person).filter(Person.user_id == user.id).count() == 1

    # Session is still usable after the rollback
    assert repository.add_if_missing(user.id, PersonKey.PERSON2, "Person 2", "USD") is True


def test_transactions_with_equal_dates_list_newest_id_first(db_session):
    user = make_user(db_session)
    repository = SqlTransactionRepository(db_session)
    when = datetime(2024, 4, 1, 9, 0)
    ids = [
        repository.add(NewTransaction(
            account_id=user.id,
            person=PersonKey.PERSON1,
            title=f"entry {index}",
            amount=Decimal("5.00"),
            currency="USD",
            type=TransactionType.EXPENSE,
            category="misc",
            date=when,
        )).id
        for index in range(3)
    ]

    listed = repository.list(user.id)
    assert [row.id for row in listed] == sorted(ids, reverse=True)
    assert listed[0].person is PersonKey.PERSON1
    assert listed[0].type is TransactionType.EXPENSE
    assert listed[0].amount == Decimal("5.00")


def test_add_if_missing_raises_constraint_errors_other_than_uniqueness(db_session):
    user = make_user(db_session)
    repository = SqlPersonRepository(db_session)
    unknown_slot = SimpleNamespace(value="person3")

    with pytest.raises(IntegrityError):
        repository.add_if_missing(user.id, unknown_slot, "Person 3", "USD")

    assert db_session.query(Person).count() == 0
    assert repository.add_if_missing(user.id, PersonKey.PERSON1, "Person 1", "USD") is True


def test_rate_upsert_raises_check_violation_for_new_pair(db_session):
    repository = SqlRateRepository(db_session)

    with pytest.raises(IntegrityError):
        repository.upsert("VND", "BTC", Decimal("0"))

    assert db_session.query(CurrencyRate).count() == 0
    assert repository.upsert("VND", "BTC", Decimal("0.000043")).rate == Decimal("0.000043")


def test_rate_upsert_updates_row_inserted_by_concurrent_request(db_session):
    repository = SqlRateRepository(db_session)
    repository.upsert("EUR", "USD", Decimal("1.08"))

    class RacingRepository(SqlRateRepository):
        stale_checks = 1

        def _row(self, base_currency, target_currency):
            if self.stale_checks:
                self.stale_checks -= 1
                return None
            return super()._row(base_currency, target_currency)

    record = RacingRepository(db_session).upsert("EUR", "USD", Decimal("1.11"))
    assert record.rate == Decimal("1.110000")
    assert db_session.query(CurrencyRate).count() == 1
