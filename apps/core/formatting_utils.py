"""
Number and currency formatting utilities for receipts and API output.

Amounts are formatted in English notation with thousand separators
(``₱1,234.56``). Calculations never go through these helpers; they only
render Decimal values that were already rounded.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from django.conf import settings

CURRENCY_SYMBOLS = {
    "PHP": "₱",
    "USD": "$",
    "EUR": "€",
}


def get_default_currency() -> str:
    pricing = getattr(settings, "POS_PRICING", {}) or {}
    return pricing.get("CURRENCY", "PHP")


def format_number(
    number: Union[int, float, Decimal],
    decimal_places: Optional[int] = None,
    use_grouping: bool = True,
) -> str:
    """
    Format a number with optional thousand separators.

    Args:
        number: Number to format
        decimal_places: Number of decimal places (None for automatic)
        use_grouping: Whether to use thousand separators

    Examples:
        >>> format_number(1234567.891, decimal_places=2)
        '1,234,567.89'
        >>> format_number(1234, use_grouping=False)
        '1234'
    """
    value = Decimal(str(number))
    if decimal_places is not None:
        value = value.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP)
        spec = f",.{decimal_places}f" if use_grouping else f".{decimal_places}f"
    else:
        spec = ",f" if use_grouping else "f"
    return format(value, spec)


def format_currency(
    amount: Union[int, float, Decimal],
    currency: Optional[str] = None,
    use_symbol: bool = True,
) -> str:
    """
    Format a currency amount.

    Args:
        amount: Amount to format
        currency: Currency code, defaults to POS_PRICING["CURRENCY"]
        use_symbol: Print the symbol (``₱``) rather than the code (``PHP``)

    Examples:
        >>> format_currency(Decimal("1234.5"), "PHP")
        '₱1,234.50'
        >>> format_currency(Decimal("-21.43"), "PHP")
        '-₱21.43'
        >>> format_currency(350, "PHP", use_symbol=False)
        'PHP 350.00'
    """
    if currency is None:
        currency = get_default_currency()

    value = Decimal(str(amount))
    sign = "-" if value < 0 else ""
    formatted_amount = format_number(abs(value), decimal_places=2)

    symbol = CURRENCY_SYMBOLS.get(currency) if use_symbol else None
    if symbol:
        return f"{sign}{symbol}{formatted_amount}"
    return f"{sign}{currency} {formatted_amount}"


def format_percentage(rate: Union[int, float, Decimal]) -> str:
    """
    Format a percentage without trailing zeros.

    Examples:
        >>> format_percentage(Decimal("12.00"))
        '12%'
        >>> format_percentage(Decimal("12.50"))
        '12.5%'
    """
    value = Decimal(str(rate)).normalize()
    return f"{value:f}%"
