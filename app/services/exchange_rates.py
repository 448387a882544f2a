"""Exchange rate refresh from the public rate source."""
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from app.config import settings
from app.errors import RefreshFetchError
from app.store import RecordStore

logger = logging.getLogger(__name__)


def _target_currencies(base: str, reference: str, currencies: list[str]) -> list[str]:
    codes = {code.upper() for code in currencies} | {reference}
    codes.discard(base)
    return sorted(codes)


def fetch_source_rates(client: Optional[httpx.Client] = None) -> dict[str, Any]:
    """
    GET the latest rates quoted against settings.rate_source_base.

    Returns the raw `rates` mapping from a `{"rates": {CODE: number}}` payload.
    """
    base = settings.rate_source_base.upper()
    reference = settings.reference_currency.upper()
    params = {
        "from": base,
        "to": ",".join(_target_currencies(base, reference, settings.supported_currencies)),
    }

    owns_client = client is None
    client = client or httpx.Client(timeout=settings.exchange_rate_timeout_seconds)
    try:
        response = client.get(settings.exchange_rate_api_url, params=params)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        raise RefreshFetchError(f"Rate source returned {e.response.status_code}", e) from e
    except httpx.HTTPError as e:
        raise RefreshFetchError(f"Rate source unreachable: {e}", e) from e
    except ValueError as e:
        raise RefreshFetchError("Rate source returned invalid JSON", e) from e
    finally:
        if owns_client:
            client.close()

    rates = data.get("rates") if isinstance(data, dict) else None
    if not isinstance(rates, dict):
        raise RefreshFetchError("Rate source payload has no rates mapping")
    return rates


def _parse_rate(code: str, value: Any) -> Decimal:
    # Strict: a malformed source rate aborts the whole refresh
    if value is None or isinstance(value, bool):
        raise RefreshFetchError(f"Rate source payload is missing a rate for {code}")
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise RefreshFetchError(f"Rate for {code} is not a number: {value!r}", e) from e
    if not rate.is_finite() or rate <= 0:
        raise RefreshFetchError(f"Rate for {code} is not positive: {value!r}")
    return rate


def derive_reference_rates(
    source_rates: dict[str, Any],
    base: str,
    reference: str,
    currencies: list[str],
) -> dict[str, Decimal]:
    """
    Convert base-quoted rates into rates to the reference currency.

    For each currency C: rate_C_to_reference = rate_base_to_reference / rate_base_to_C.
    The base currency itself is quoted at 1. Raises RefreshFetchError if any
    rate needed is missing or malformed.
    """
    base = base.upper()
    reference = reference.upper()

    def base_to(code: str) -> Decimal:
        if code == base:
            return Decimal("1")
        return _parse_rate(code, source_rates.get(code))

    base_to_reference = base_to(reference)
    derived = {}
    for code in sorted({c.upper() for c in currencies}):
        if code == reference:
            continue
        derived[code] = base_to_reference / base_to(code)
    return derived


def refresh_exchange_rates(
    store: RecordStore,
    client: Optional[httpx.Client] = None,
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """
    Fetch, derive and upsert one exchange_rates row per supported currency.

    All rows are computed before anything is written, and the upsert is a
    single batch, so a failure leaves the previous rates untouched.

    Raises:
        RefreshFetchError: the source failed or the payload was malformed.
        RemoteWriteError: the upsert batch was rejected.
    """
    source_rates = fetch_source_rates(client)
    derived = derive_reference_rates(
        source_rates,
        base=settings.rate_source_base,
        reference=settings.reference_currency,
        currencies=settings.supported_currencies,
    )

    now = now or datetime.now(timezone.utc)
    rows = [
        {"code": code, "rate_to_reference": rate, "updated_at": now}
        for code, rate in derived.items()
    ]
    store.upsert_many("exchange_rates", rows, key="code")

    logger.info(
        "Exchange rates updated: "
        + ", ".join(f"{row['code']}={row['rate_to_reference']:.4f}" for row in rows)
    )
    return rows
