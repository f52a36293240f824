"""
Input validation shared by the finance services.

Raw request values are parsed here exactly once; everything past the service
boundary works with PersonKey / TransactionType enums and normalized Decimals.
"""
import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

from together.core.exceptions import ValidationError
from together.models.person import PersonKey
from together.models.transaction import TransactionType

CURRENCY_CODE_RE = re.compile(r"^[A-Z]{3}$")
TWO_PLACES = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999999.99")  # Numeric(15, 2)
RATE_PLACES = Decimal("0.000001")
MAX_RATE = Decimal("999999999.999999")  # Numeric(15, 6)

# Query value meaning "both person slots"
BOTH_PERSONS = "both"


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def normalize_currency(code: Optional[str], field: str = "currency") -> str:
    """Return the upper-cased 3-letter currency code or raise ValidationError."""
    if not isinstance(code, str):
        raise ValidationError(f"{field} must be a 3-letter currency code")
    normalized = code.strip().upper()
    if not CURRENCY_CODE_RE.match(normalized):
        raise ValidationError(f"{field} must be a 3-letter currency code, got '{code}'")
    return normalized


def parse_person_key(value: Union[str, PersonKey]) -> PersonKey:
    """Parse a person slot key."""
    if isinstance(value, PersonKey):
        return value
    try:
        return PersonKey(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(key.value for key in PersonKey)
        raise ValidationError(f"Invalid person key '{value}', expected one of: {allowed}")


def parse_person_filter(value: Optional[Union[str, PersonKey]]) -> Optional[PersonKey]:
    """Parse a person filter where None or 'both' selects both slots."""
    if value is None or (isinstance(value, str) and value.strip().lower() in ("", BOTH_PERSONS)):
        return None
    return parse_person_key(value)


def parse_transaction_type(value: Union[str, TransactionType]) -> TransactionType:
    """Parse a transaction type."""
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(t.value for t in TransactionType)
        raise ValidationError(f"Invalid transaction type '{value}', expected one of: {allowed}")


def parse_amount(value) -> Decimal:
    """Parse a positive monetary amount, rounded to 2 decimal places."""
    if isinstance(value, bool):
        raise ValidationError("amount must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"amount must be a number, got '{value}'")
    if not amount.is_finite():
        raise ValidationError("amount must be a finite number")
    if amount >= MAX_AMOUNT + TWO_PLACES / 2:
        raise ValidationError("amount is too large")
    amount = round_money(amount)
    if amount <= 0:
        raise ValidationError("amount must be greater than 0")
    return amount


def parse_rate(value) -> Decimal:
    """Parse a positive conversion rate, rounded half-up to the 6 places stored."""
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"rate must be a number, got '{value}'")
    if not rate.is_finite():
        raise ValidationError("rate must be a finite number")
    # Anything that would round past the column maximum
    if rate >= MAX_RATE + RATE_PLACES / 2:
        raise ValidationError("rate is too large")
    rate = rate.quantize(RATE_PLACES, rounding=ROUND_HALF_UP)
    if rate <= 0:
        raise ValidationError("rate must be at least 0.000001")
    return rate


def require_text(value: Optional[str], field: str, max_length: int) -> str:
    """Strip and check a required free-text field."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    if len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return text


def parse_timestamp(value, field: str = "date") -> datetime:
    """Accept a datetime (or date) and return it as naive UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise ValidationError(f"{field} must be a timestamp")
