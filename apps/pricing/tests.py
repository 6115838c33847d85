"""
Tests for VAT helpers and the checkout pricing service.

Tests:
- VAT extraction from inclusive and exclusive amounts
- Rate resolution from settings
- Product pricing through the discount engine
- Receipt VAT summary
"""

from decimal import Decimal

from django.test import TestCase, override_settings

from apps.inventory.models import Product

from .discounts import CustomerType, InvalidInputError, LineItem
from .services import CheckoutPricingService, get_cash_limit, get_pricing_config
from .vat import (
    calculate_vat_for_items,
    calculate_vat_from_exclusive,
    calculate_vat_from_inclusive,
    format_vat_breakdown,
    get_default_vat_rate,
    validate_vat_breakdown,
)

CUSTOM_PRICING = {
    "VAT_RATE": "10.00",
    "SENIOR_PWD_DISCOUNT_RATE": "5.00",
    "CURRENCY": "PHP",
    "CASH_LIMIT": "5000.00",
}


class VATCalculationTest(TestCase):
    """Test VAT helpers."""

    def test_vat_from_inclusive(self):
        breakdown = calculate_vat_from_inclusive(Decimal("112.00"), 12)

        self.assertEqual(breakdown.total, Decimal("112.00"))
        self.assertEqual(breakdown.vat_amount, Decimal("12.00"))
        self.assertEqual(breakdown.net_sales, Decimal("100.00"))
        self.assertEqual(breakdown.vat_rate, Decimal("12"))

    def test_vat_from_inclusive_rounds_to_centavos(self):
        breakdown = calculate_vat_from_inclusive(Decimal("200.00"), 12)

        self.assertEqual(breakdown.vat_amount, Decimal("21.43"))
        self.assertEqual(breakdown.net_sales, Decimal("178.57"))
        self.assertTrue(validate_vat_breakdown(breakdown))

    def test_half_centavo_vat_keeps_breakdown_balanced(self):
        breakdown = calculate_vat_from_inclusive(Decimal("100.10"), 12)

        self.assertEqual(breakdown.vat_amount, Decimal("10.73"))
        self.assertEqual(breakdown.net_sales, Decimal("89.37"))
        self.assertEqual(breakdown.net_sales + breakdown.vat_amount, breakdown.total)

    def test_smallest_half_centavo_total_validates(self):
        breakdown = calculate_vat_from_inclusive(Decimal("0.14"), 12)

        self.assertEqual(breakdown.vat_amount, Decimal("0.02"))
        self.assertEqual(breakdown.net_sales, Decimal("0.12"))
        self.assertTrue(validate_vat_breakdown(breakdown))

    def test_vat_from_exclusive(self):
        breakdown = calculate_vat_from_exclusive(Decimal("100.00"), 12)

        self.assertEqual(breakdown.total, Decimal("112.00"))
        self.assertEqual(breakdown.vat_amount, Decimal("12.00"))

    def test_default_rate_from_settings(self):
        self.assertEqual(get_default_vat_rate(), Decimal("12.00"))
        self.assertEqual(calculate_vat_from_inclusive("112.00").vat_amount, Decimal("12.00"))

    @override_settings(POS_PRICING=CUSTOM_PRICING)
    def test_configured_rate(self):
        self.assertEqual(get_default_vat_rate(), Decimal("10.00"))
        self.assertEqual(calculate_vat_from_inclusive("110.00").vat_amount, Decimal("10.00"))

    def test_vat_for_items(self):
        breakdown = calculate_vat_for_items(
            [{"price": "100.00", "quantity": 2}, {"price": Decimal("150.00"), "quantity": 1}],
            12,
        )

        self.assertEqual(breakdown.total, Decimal("350.00"))
        self.assertEqual(breakdown.vat_amount, Decimal("37.50"))
        self.assertEqual(breakdown.net_sales, Decimal("312.50"))

    def test_rejects_negative_amount(self):
        with self.assertRaises(InvalidInputError):
            calculate_vat_from_inclusive("-1.00", 12)

    def test_rejects_rate_out_of_range(self):
        with self.assertRaises(InvalidInputError):
            calculate_vat_from_inclusive("100.00", 101)

    def test_format_breakdown(self):
        text = format_vat_breakdown(calculate_vat_from_inclusive("112.00", 12))

        self.assertIn("Total (VAT Inclusive): ₱112.00", text)
        self.assertIn("VAT (12%): ₱12.00", text)
        self.assertIn("Net Sales: ₱100.00", text)


class PricingConfigTest(TestCase):
    """Test rate resolution."""

    def test_statutory_defaults(self):
        pricing = CheckoutPricingService()

        self.assertEqual(pricing.vat_rate, Decimal("0.12"))
        self.assertEqual(pricing.discount_rate, Decimal("0.20"))
        self.assertTrue(pricing.uses_statutory_rates)

    @override_settings(POS_PRICING=CUSTOM_PRICING)
    def test_rates_from_settings(self):
        pricing = CheckoutPricingService()

        self.assertEqual(pricing.vat_rate_percent, Decimal("10.00"))
        self.assertEqual(pricing.discount_rate_percent, Decimal("5.00"))
        self.assertFalse(pricing.uses_statutory_rates)
        self.assertEqual(get_cash_limit(), Decimal("5000.00"))

    @override_settings(POS_PRICING={"VAT_RATE": "12.00"})
    def test_partial_settings_fall_back_to_defaults(self):
        config = get_pricing_config()

        self.assertEqual(config["SENIOR_PWD_DISCOUNT_RATE"], "20.00")
        self.assertEqual(config["CASH_LIMIT"], "10000.00")

    def test_explicit_rates_override_settings(self):
        pricing = CheckoutPricingService(vat_rate=10, discount_rate=5)

        self.assertEqual(pricing.vat_rate, Decimal("0.1"))
        self.assertEqual(pricing.discount_rate, Decimal("0.05"))

    def test_invalid_rate_rejected(self):
        with self.assertRaises(InvalidInputError):
            CheckoutPricingService(vat_rate="twelve")


class CheckoutPricingServiceTest(TestCase):
    """Test cart pricing and the receipt VAT summary."""

    def setUp(self):
        self.milk = Product.objects.create(
            sku="DAIRY-001", name="Milk", price=Decimal("100.00"), stock=50
        )
        self.cigarettes = Product.objects.create(
            sku="TOB-001",
            name="Cigarettes",
            price=Decimal("150.00"),
            stock=20,
            is_discountable=False,
            is_vat_exemptable=False,
        )
        self.pricing = CheckoutPricingService()

    def test_senior_cart(self):
        result = self.pricing.calculate_for_products(
            [(self.milk, 2, None), (self.cigarettes, 1, None)], CustomerType.SENIOR
        )

        self.assertEqual(result.subtotal, Decimal("350.00"))
        self.assertEqual(result.total_vat_exempt, Decimal("21.43"))
        self.assertEqual(result.total_discount_amount, Decimal("35.71"))
        self.assertEqual(result.amount_due, Decimal("292.86"))
        self.assertEqual(result.items[0].product_id, str(self.milk.id))

    def test_price_override(self):
        result = self.pricing.calculate_for_products(
            [(self.milk, 1, Decimal("112.00"))], CustomerType.REGULAR
        )

        self.assertEqual(result.amount_due, Decimal("112.00"))

    def test_vat_summary_for_senior_cart(self):
        result = self.pricing.calculate_for_products(
            [(self.milk, 2, None), (self.cigarettes, 1, None)], CustomerType.SENIOR
        )

        summary = self.pricing.vat_summary(result)

        self.assertEqual(summary.vatable_sales, Decimal("133.93"))
        self.assertEqual(summary.vat_amount, Decimal("16.07"))
        self.assertEqual(summary.vat_exempt_sales, Decimal("142.86"))
        self.assertEqual(
            summary.vatable_sales + summary.vat_amount + summary.vat_exempt_sales,
            result.amount_due,
        )

    def test_vat_summary_for_regular_cart(self):
        result = self.pricing.calculate_for_products(
            [(self.milk, 2, None), (self.cigarettes, 1, None)], CustomerType.REGULAR
        )

        summary = self.pricing.vat_summary(result)

        self.assertEqual(summary.vatable_sales, Decimal("312.50"))
        self.assertEqual(summary.vat_amount, Decimal("37.50"))
        self.assertEqual(summary.vat_exempt_sales, Decimal("0.00"))

    def test_vat_summary_balances_on_half_centavo(self):
        item = LineItem("x", "Cheese", Decimal("100.10"), 1)
        result = self.pricing.calculate([item], CustomerType.REGULAR)

        summary = self.pricing.vat_summary(result)

        self.assertEqual(summary.vatable_sales, Decimal("89.37"))
        self.assertEqual(summary.vat_amount, Decimal("10.73"))
        self.assertEqual(
            summary.vatable_sales + summary.vat_amount + summary.vat_exempt_sales,
            result.amount_due,
        )

    @override_settings(POS_PRICING=CUSTOM_PRICING)
    def test_configured_rates_reach_engine(self):
        pricing = CheckoutPricingService()
        item = LineItem("x", "Rice", Decimal("110.00"), 1)

        result = pricing.calculate([item], CustomerType.PWD)

        self.assertEqual(result.total_vat_exempt, Decimal("10.00"))
        self.assertEqual(result.total_discount_amount, Decimal("5.00"))
        self.assertEqual(result.amount_due, Decimal("95.00"))
        self.assertEqual(result.discount_label, "PWD Discount (5%)")
