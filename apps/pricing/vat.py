"""
Philippine VAT helpers.

Shelf prices are VAT-inclusive, so VAT is extracted with
``VAT = total * rate / (100 + rate)``. Rates in this module are percentages
(12 means 12%), matching how the rate is configured in ``POS_PRICING``.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from django.conf import settings

from .discounts import InvalidInputError, Number, quantize, to_decimal

DEFAULT_VAT_RATE_PERCENT = Decimal("12.00")

# One centavo of slack for values that were rounded independently
VAT_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class VATBreakdown:
    """VAT split of an amount."""

    total: Decimal
    vat_amount: Decimal
    net_sales: Decimal
    vat_rate: Decimal


def get_default_vat_rate() -> Decimal:
    """Configured VAT rate in percent, falling back to the statutory 12%."""
    pricing = getattr(settings, "POS_PRICING", {}) or {}
    return to_decimal(pricing.get("VAT_RATE", DEFAULT_VAT_RATE_PERCENT), "VAT_RATE")


def _validate(amount: Number, vat_rate: Number, label: str):
    amount = to_decimal(amount, label)
    rate = to_decimal(vat_rate, "vat_rate")
    if amount < 0:
        raise InvalidInputError(f"{label} cannot be negative")
    if rate < 0 or rate > 100:
        raise InvalidInputError("VAT rate must be between 0 and 100")
    return amount, rate


def calculate_vat_from_inclusive(
    total_amount: Number, vat_rate: Optional[Number] = None
) -> VATBreakdown:
    """
    Extract VAT from a VAT-inclusive total.

    Examples:
        >>> calculate_vat_from_inclusive("112.00", 12).vat_amount
        Decimal('12.00')
    """
    if vat_rate is None:
        vat_rate = get_default_vat_rate()
    total, rate = _validate(total_amount, vat_rate, "Total amount")

    total = quantize(total)
    vat_amount = quantize(total * rate / (100 + rate))

    return VATBreakdown(
        total=total,
        vat_amount=vat_amount,
        net_sales=total - vat_amount,
        vat_rate=rate,
    )


def calculate_vat_from_exclusive(
    net_amount: Number, vat_rate: Optional[Number] = None
) -> VATBreakdown:
    """Add VAT on top of a VAT-exclusive amount."""
    if vat_rate is None:
        vat_rate = get_default_vat_rate()
    net, rate = _validate(net_amount, vat_rate, "Net amount")

    net = quantize(net)
    vat_amount = quantize(net * rate / 100)

    return VATBreakdown(
        total=net + vat_amount,
        vat_amount=vat_amount,
        net_sales=net,
        vat_rate=rate,
    )


def calculate_vat_for_items(
    items: Iterable[Mapping], vat_rate: Optional[Number] = None
) -> VATBreakdown:
    """
    VAT breakdown for the combined total of ``price * quantity`` entries.

    Each entry is a mapping with ``price`` and ``quantity`` keys.
    """
    total = sum(
        (to_decimal(item["price"], "price") * int(item["quantity"]) for item in items),
        Decimal("0.00"),
    )
    return calculate_vat_from_inclusive(total, vat_rate)


def validate_vat_breakdown(breakdown: VATBreakdown) -> bool:
    """True when net sales plus VAT matches the total within one centavo."""
    return abs(breakdown.net_sales + breakdown.vat_amount - breakdown.total) <= VAT_TOLERANCE


def format_vat_breakdown(breakdown: VATBreakdown, currency: str = "₱") -> str:
    rate = breakdown.vat_rate.normalize()
    return "\n".join(
        [
            f"Total (VAT Inclusive): {currency}{breakdown.total:.2f}",
            f"VAT ({rate:f}%): {currency}{breakdown.vat_amount:.2f}",
            f"Net Sales: {currency}{breakdown.net_sales:.2f}",
        ]
    )
