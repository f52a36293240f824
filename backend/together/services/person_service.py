"""
Person registry: the two fixed partner slots of every account.
"""
import logging
from typing import Dict, Optional, Union

from together.core.config import settings
from together.core.exceptions import NotFoundError, ValidationError
from together.core.validation import normalize_currency, parse_person_key, require_text
from together.models.person import DEFAULT_PERSON_NAMES, PersonKey
from together.repositories.base import PersonRecord, PersonRepository

logger = logging.getLogger(__name__)


class PersonRegistry:
    """Maintains the person1/person2 slots and their currency preference."""

    def __init__(self, repository: PersonRepository):
        self.repository = repository

    def ensure_initialized(self, account_id: int) -> None:
        """Create any missing slot with its default name and currency. Safe to repeat."""
        default_currency = normalize_currency(settings.DEFAULT_CURRENCY, "DEFAULT_CURRENCY")
        for person_key in PersonKey:
            created = self.repository.add_if_missing(
                account_id,
                person_key,
                DEFAULT_PERSON_NAMES[person_key],
                default_currency,
            )
            if created:
                logger.info(f"Created {person_key.value} for account {account_id}")

    def get_persons(self, account_id: int) -> Dict[PersonKey, PersonRecord]:
        persons = {row.person_key: row for row in self.repository.list_for_account(account_id)}
        missing = [key.value for key in PersonKey if key not in persons]
        if missing:
            raise NotFoundError(
                f"Person registry is not initialized for account {account_id}",
                details={"missing": missing},
            )
        return persons

    def get_person(self, account_id: int, person_key: Union[str, PersonKey]) -> PersonRecord:
        key = parse_person_key(person_key)
        person = self.repository.get(account_id, key)
        if person is None:
            raise NotFoundError(f"Person {key.value} not found")
        return person

    def update_person(
        self,
        account_id: int,
        person_key: Union[str, PersonKey],
        name: Optional[str] = None,
        currency_preference: Optional[str] = None,
    ) -> PersonRecord:
        """Partially update a slot; fields left as None are unchanged."""
        key = parse_person_key(person_key)
        if name is not None:
            name = require_text(name, "name", 100)
        if currency_preference is not None:
            currency_preference = normalize_currency(currency_preference, "currency_preference")
        if name is None and currency_preference is None:
            raise ValidationError("Nothing to update: provide name and/or currency_preference")

        person = self.repository.update(account_id, key, name=name, currency_preference=currency_preference)
        if person is None:
            raise NotFoundError(f"Person {key.value} not found")

        logger.info(f"Updated {key.value} for account {account_id}")
        return person
