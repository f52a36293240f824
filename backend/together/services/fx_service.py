"""
Foreign exchange service for currency conversion and rate table maintenance.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple
import logging

import httpx

from together.core.config import settings
from together.core.exceptions import NotFoundError, ValidationError
from together.core.validation import normalize_currency, parse_amount, parse_rate, round_money
from together.repositories.base import RateRecord, RateRepository

logger = logging.getLogger(__name__)

IDENTITY_RATE = Decimal(1)


@dataclass(frozen=True)
class Conversion:
    """Result of converting one amount into another currency."""
    amount: Decimal
    from_currency: str
    to_currency: str
    rate: Decimal
    converted: Decimal
    rate_found: bool
    last_updated: Optional[datetime] = None


def convert_amount(amount: Decimal, rate: Decimal) -> Decimal:
    """Convert with a known rate, rounding half-up to 2 decimal places."""
    if rate == IDENTITY_RATE:
        return amount
    return round_money(amount * rate)


class CurrencyConverter:
    """
    Resolves conversion rates from the rate table.

    A pair with no stored row converts at rate 1. Such misses are logged
    at WARNING and collected in `missing_pairs` so callers can report them.
    Lookups are memoized per instance, so create one converter per request.
    """

    def __init__(self, rates: RateRepository):
        self.rates = rates
        self._cache: Dict[Tuple[str, str], Tuple[Decimal, bool, Optional[datetime]]] = {}
        self.missing_pairs = set()

    def resolve(self, base_currency: str, target_currency: str) -> Tuple[Decimal, bool, Optional[datetime]]:
        """
        Get the rate for a pair.

        Returns:
            (rate, rate_found, last_updated); same-currency pairs are (1, True, None)
            without touching the table.
        """
        if base_currency == target_currency:
            return IDENTITY_RATE, True, None

        pair = (base_currency, target_currency)
        if pair not in self._cache:
            record = self.rates.get(base_currency, target_currency)
            if record is not None:
                self._cache[pair] = (record.rate, True, record.last_updated)
            else:
                logger.warning(
                    f"No currency rate stored for {base_currency} -> {target_currency}; converting at rate 1"
                )
                self.missing_pairs.add(pair)
                self._cache[pair] = (IDENTITY_RATE, False, None)
        return self._cache[pair]

    def rate(self, base_currency: str, target_currency: str) -> Decimal:
        return self.resolve(base_currency, target_currency)[0]

    def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Conversion:
        rate, found, last_updated = self.resolve(from_currency, to_currency)
        return Conversion(
            amount=amount,
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            converted=convert_amount(amount, rate),
            rate_found=found,
            last_updated=last_updated,
        )


class CurrencyRateService:
    """Read, upsert and ad-hoc conversion over the currency rate table."""

    def __init__(self, rates: RateRepository):
        self.rates = rates

    def get_rate(self, base_currency: str, target_currency: str) -> RateRecord:
        base = normalize_currency(base_currency, "base_currency")
        target = normalize_currency(target_currency, "target_currency")
        record = self.rates.get(base, target)
        if record is None:
            raise NotFoundError(f"Exchange rate not found for {base} -> {target}")
        return record

    def list_rates(self, base_currency: Optional[str] = None):
        base = normalize_currency(base_currency, "base_currency") if base_currency else None
        return self.rates.list(base)

    def upsert_rate(self, base_currency: str, target_currency: str, rate) -> RateRecord:
        base = normalize_currency(base_currency, "base_currency")
        target = normalize_currency(target_currency, "target_currency")
        if base == target:
            raise ValidationError("base_currency and target_currency must differ")
        value = parse_rate(rate)
        record = self.rates.upsert(base, target, value)
        logger.info(f"Stored currency rate {base} -> {target} = {value}")
        return record

    def convert(self, amount, from_currency: str, to_currency: str) -> Conversion:
        value = parse_amount(amount)
        source = normalize_currency(from_currency, "from")
        target = normalize_currency(to_currency, "to")
        return CurrencyConverter(self.rates).convert(value, source, target)


def fetch_rates_from_api(
    base_currency: str,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Decimal]:
    """
    Fetch the latest rates for one base currency.

    Calls GET {FX_API_URL}/{BASE}, which answers
    {"base": "USD", "rates": {"EUR": 0.92, ...}}.

    Returns:
        Mapping of target currency code to rate (1 base = rate target)

    Raises:
        ValueError: On HTTP/network failure or a malformed response
    """
    base_upper = base_currency.upper()
    api_url = f"{settings.FX_API_URL.rstrip('/')}/{base_upper}"
    logger.info(f"Fetching latest exchange rates for {base_upper}")

    try:
        if client is not None:
            response = client.get(api_url, timeout=settings.FX_TIMEOUT_SECONDS)
        else:
            response = httpx.get(api_url, timeout=settings.FX_TIMEOUT_SECONDS)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error(f"HTTP error from exchange rate API: {e.response.status_code} - {e.response.text}")
        raise ValueError(f"Exchange rate API HTTP error: {e.response.status_code}")
    except httpx.HTTPError as e:
        logger.error(f"Network error from exchange rate API: {e}")
        raise ValueError(f"Exchange rate API network error: {str(e)}")

    if settings.DEBUG:
        logger.debug(f"Exchange rate API response: {data}")

    raw_rates = data.get("rates") if isinstance(data, dict) else None
    if not isinstance(raw_rates, dict):
        logger.error(f"Exchange rate API response for {base_upper} has no 'rates' object")
        raise ValueError(f"Malformed exchange rate response for {base_upper}")

    rates = {}
    for code, value in raw_rates.items():
        try:
            rates[code.upper()] = parse_rate(value)
        except ValidationError:
            logger.warning(f"Skipping invalid rate {base_upper} -> {code}: {value}")
    return rates


def refresh_rates(
    rates: RateRepository,
    currencies: Optional[Iterable[str]] = None,
    client: Optional[httpx.Client] = None,
) -> int:
    """
    Refresh every pair among `currencies` from the exchange rate API.

    A base currency whose fetch fails is logged and skipped; the other
    bases are still refreshed.

    Returns:
        Number of pairs upserted
    """
    codes = [normalize_currency(code) for code in (currencies or settings.FX_CURRENCIES)]
    updated = 0

    for base in codes:
        try:
            fetched = fetch_rates_from_api(base, client=client)
        except ValueError as e:
            logger.error(f"Skipping rate refresh for {base}: {e}")
            continue

        for target in codes:
            if target == base or target not in fetched:
                continue
            rates.upsert(base, target, fetched[target])
            updated += 1

    logger.info(f"Currency rate refresh upserted {updated} pairs")
    return updated
