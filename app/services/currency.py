"""Currency normalization against the exchange rate table."""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from app.config import settings
from app.errors import RateUnavailableError

logger = logging.getLogger(__name__)

# Returned for missing, empty or non-numeric amounts
DEFAULT_AMOUNT = Decimal("0")

RateTable = dict[str, Decimal]


def parse_amount_or_default(value: Any, default: Decimal = DEFAULT_AMOUNT) -> Decimal:
    """
    Coerce a stored amount to Decimal.

    Anything that is not a finite number (None, "", "abc", NaN, booleans)
    yields `default`, so a single malformed record cannot abort a total.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    if not amount.is_finite():
        return default
    return amount


def build_rate_table(rows: Iterable[Any]) -> RateTable:
    """Build a code -> rate mapping from exchange rate rows (models or dicts)."""
    table: RateTable = {}
    for row in rows:
        if isinstance(row, dict):
            code, rate = row.get("code"), row.get("rate_to_reference")
        else:
            code, rate = row.code, row.rate_to_reference
        if not code:
            continue
        parsed = parse_amount_or_default(rate)
        if parsed > 0:
            table[code.upper()] = parsed
    return table


def load_rate_table(store) -> RateTable:
    return build_rate_table(store.query("exchange_rates"))


def lookup_rate(currency: str, rate_table: RateTable) -> Decimal:
    try:
        return rate_table[currency]
    except KeyError:
        raise RateUnavailableError(currency)


def fallback_rate(currency: str) -> Decimal:
    """Last-known configured rate for `currency`, else the configured default."""
    default = parse_amount_or_default(settings.default_fallback_rate, Decimal("1"))
    return parse_amount_or_default(settings.fallback_rates.get(currency), default)


def normalize(
    amount: Any,
    currency: Optional[str],
    rate_table: RateTable,
    reference_currency: Optional[str] = None,
) -> Decimal:
    """
    Convert `amount` from `currency` into the reference currency.

    A missing rate never raises: the fallback rate is used instead and a
    warning is logged. Amounts are parsed with parse_amount_or_default and
    returned unrounded.
    """
    reference = (reference_currency or settings.reference_currency).upper()
    code = (currency or reference).upper()
    value = parse_amount_or_default(amount)

    if code == reference:
        return value

    try:
        rate = lookup_rate(code, rate_table)
    except RateUnavailableError:
        rate = fallback_rate(code)
        logger.warning(f"No exchange rate for {code}, using fallback rate {rate}")

    return value * rate
