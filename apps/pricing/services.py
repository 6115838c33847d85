"""
Checkout pricing services.

Binds the Senior Citizen / PWD discount engine to the configured rates and
produces the VAT summary printed on receipts:
- Rates come from ``settings.POS_PRICING`` (percentages) with statutory defaults
- Catalog products are turned into engine line items
- VATable sales, VAT-exempt sales and VAT amount are derived from the
  discounted line totals
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from django.conf import settings

from .discounts import (
    DEFAULT_DISCOUNT_RATE,
    DEFAULT_VAT_RATE,
    ZERO,
    LineItem,
    Number,
    TransactionDiscountResult,
    compute_transaction_discount,
    to_decimal,
)
from .vat import calculate_vat_from_inclusive

logger = logging.getLogger(__name__)

DEFAULT_PRICING_CONFIG = {
    "VAT_RATE": "12.00",
    "SENIOR_PWD_DISCOUNT_RATE": "20.00",
    "CURRENCY": "PHP",
    "CASH_LIMIT": "10000.00",
}


def get_pricing_config() -> Dict[str, str]:
    """Merged pricing configuration: settings.POS_PRICING over the defaults."""
    config = dict(DEFAULT_PRICING_CONFIG)
    config.update(getattr(settings, "POS_PRICING", {}) or {})
    return config


def get_cash_limit() -> Decimal:
    return to_decimal(get_pricing_config()["CASH_LIMIT"], "CASH_LIMIT")


@dataclass(frozen=True)
class VATSummary:
    """VAT lines of a Philippine sales receipt."""

    vatable_sales: Decimal
    vat_exempt_sales: Decimal
    vat_amount: Decimal
    vat_rate: Decimal


class CheckoutPricingService:
    """
    Prices a cart for checkout.

    Handles:
    - Rate resolution (explicit arguments, then settings, then statutory defaults)
    - Product to line item conversion
    - Discount engine invocation
    - Receipt VAT summary
    """

    def __init__(
        self, vat_rate: Optional[Number] = None, discount_rate: Optional[Number] = None
    ):
        """
        Args:
            vat_rate: VAT rate in percent (default: POS_PRICING["VAT_RATE"])
            discount_rate: Senior/PWD discount in percent
                (default: POS_PRICING["SENIOR_PWD_DISCOUNT_RATE"])
        """
        config = get_pricing_config()
        if vat_rate is None:
            vat_rate = config["VAT_RATE"]
        if discount_rate is None:
            discount_rate = config["SENIOR_PWD_DISCOUNT_RATE"]

        self.vat_rate_percent = to_decimal(vat_rate, "VAT_RATE")
        self.discount_rate_percent = to_decimal(discount_rate, "SENIOR_PWD_DISCOUNT_RATE")

        if not self.uses_statutory_rates:
            logger.info(
                "Checkout pricing with non-statutory rates: VAT %s%%, discount %s%%",
                self.vat_rate_percent,
                self.discount_rate_percent,
            )

    @property
    def vat_rate(self) -> Decimal:
        """VAT rate as a fraction, the form the engine works in."""
        return self.vat_rate_percent / 100

    @property
    def discount_rate(self) -> Decimal:
        return self.discount_rate_percent / 100

    @property
    def uses_statutory_rates(self) -> bool:
        return self.vat_rate == DEFAULT_VAT_RATE and self.discount_rate == DEFAULT_DISCOUNT_RATE

    def calculate(
        self, items: Iterable[LineItem], customer_type: str
    ) -> TransactionDiscountResult:
        """Run the discount engine over ``items`` with the configured rates."""
        return compute_transaction_discount(
            items,
            customer_type,
            vat_rate=self.vat_rate,
            discount_rate=self.discount_rate,
        )

    def calculate_for_products(
        self,
        lines: Iterable[Tuple[object, int, Optional[Decimal]]],
        customer_type: str,
    ) -> TransactionDiscountResult:
        """
        Price ``(product, quantity, unit_price_override)`` tuples.

        The override is used when the cashier keys in a price; otherwise the
        product's current price applies.
        """
        items: List[LineItem] = [
            product.to_line_item(quantity, unit_price=unit_price)
            for product, quantity, unit_price in lines
        ]
        return self.calculate(items, customer_type)

    def vat_summary(self, result: TransactionDiscountResult) -> VATSummary:
        """
        Split the amount due into VATable and VAT-exempt sales.

        VAT is only carried by lines that were not VAT-exempted, extracted
        from their discounted (still VAT-inclusive) totals.
        """
        vatable_total = ZERO
        vat_exempt_sales = ZERO
        for item in result.items:
            if item.vat_exempt:
                vat_exempt_sales += item.final_price
            else:
                vatable_total += item.final_price

        breakdown = calculate_vat_from_inclusive(vatable_total, self.vat_rate_percent)

        return VATSummary(
            vatable_sales=breakdown.net_sales,
            vat_exempt_sales=vat_exempt_sales,
            vat_amount=breakdown.vat_amount,
            vat_rate=self.vat_rate_percent,
        )
