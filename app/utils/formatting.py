"""Display formatting for amounts, durations and subscription types."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from app.services.currency import parse_amount_or_default


def format_currency(amount: Any, currency: str) -> str:
    """
    Format an amount with two decimals and thousands grouping.

    Examples:
        format_currency(1234.5, "NOK") -> "NOK 1,234.50"
        format_currency(None, "USD")   -> "USD 0.00"
    """
    value = parse_amount_or_default(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{currency} {value:,.2f}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''}"


def format_duration(days: int) -> str:
    """
    Human readable duration using 30-day months.

    Examples:
        format_duration(1)  -> "1 day"
        format_duration(45) -> "1 month, 15 days"
        format_duration(60) -> "2 months"
    """
    if days < 30:
        return _plural(days, "day")
    months, remaining = divmod(days, 30)
    result = _plural(months, "month")
    if remaining > 0:
        result += f", {_plural(remaining, 'day')}"
    return result


def format_subscription_type(subscription_type: str) -> str:
    return "Temp" if subscription_type == "temporary" else "Normal"
