"""
Tests for the Senior Citizen / PWD discount engine.

Tests cover:
- Identity for regular customers and ineligible items
- VAT-only, discount-only and full relief per item
- Transaction aggregation and the amount due invariant
- Input validation
- Determinism, monotonicity and order preservation
"""

from decimal import Decimal

import pytest

from apps.pricing.discounts import (
    CustomerType,
    InvalidInputError,
    LineItem,
    compute_item_discount,
    compute_transaction_discount,
    get_discount_label,
    quantize,
    to_decimal,
)


class TestComputeItemDiscount:
    """Per-unit Senior Citizen / PWD treatment."""

    @pytest.mark.parametrize(
        "discountable,exemptable",
        [(True, True), (True, False), (False, True), (False, False)],
    )
    def test_regular_customer_is_never_discounted(self, discountable, exemptable):
        result = compute_item_discount(
            Decimal("100.00"), discountable, exemptable, CustomerType.REGULAR
        )

        assert result.original_price == Decimal("100.00")
        assert result.net_of_vat == Decimal("100.00")
        assert result.vat_amount == Decimal("0.00")
        assert result.discount_amount == Decimal("0.00")
        assert result.final_price == Decimal("100.00")
        assert result.vat_exempt is False
        assert result.discount_applied is False

    @pytest.mark.parametrize("customer_type", [CustomerType.SENIOR, CustomerType.PWD])
    def test_ineligible_item_is_unchanged(self, customer_type):
        result = compute_item_discount(Decimal("150.00"), False, False, customer_type)

        assert result.final_price == Decimal("150.00")
        assert result.vat_amount == Decimal("0.00")
        assert result.discount_amount == Decimal("0.00")
        assert result.vat_exempt is False
        assert result.discount_applied is False

    def test_vat_exemption_only(self):
        result = compute_item_discount(Decimal("112.00"), False, True, CustomerType.SENIOR)

        assert result.net_of_vat == Decimal("100.00")
        assert result.vat_amount == Decimal("12.00")
        assert result.discount_amount == Decimal("0.00")
        assert result.final_price == Decimal("100.00")
        assert result.vat_exempt is True
        assert result.discount_applied is False

    def test_full_relief_for_senior(self):
        result = compute_item_discount(Decimal("100.00"), True, True, CustomerType.SENIOR)

        assert result.net_of_vat == Decimal("89.29")
        assert result.vat_amount == Decimal("10.71")
        assert result.discount_amount == Decimal("17.86")
        assert result.final_price == Decimal("71.43")
        assert result.vat_exempt is True
        assert result.discount_applied is True

    def test_discount_only_for_pwd(self):
        result = compute_item_discount(Decimal("100.00"), True, False, CustomerType.PWD)

        assert result.net_of_vat == Decimal("100.00")
        assert result.vat_amount == Decimal("0.00")
        assert result.discount_amount == Decimal("20.00")
        assert result.final_price == Decimal("80.00")
        assert result.vat_exempt is False
        assert result.discount_applied is True

    def test_vat_is_divided_out_not_subtracted(self):
        """Removing 12% of the price would give 88.00, not 89.29."""
        result = compute_item_discount(Decimal("100.00"), False, True, CustomerType.SENIOR)

        assert result.net_of_vat != Decimal("88.00")
        assert result.net_of_vat == Decimal("89.29")

    def test_zero_price(self):
        result = compute_item_discount(Decimal("0"), True, True, CustomerType.SENIOR)

        assert result.final_price == Decimal("0.00")
        assert result.vat_amount == Decimal("0.00")
        assert result.discount_amount == Decimal("0.00")

    def test_accepts_int_str_and_float_prices(self):
        expected = compute_item_discount(Decimal("100.00"), True, True, CustomerType.SENIOR)

        assert compute_item_discount(100, True, True, CustomerType.SENIOR) == expected
        assert compute_item_discount("100.00", True, True, CustomerType.SENIOR) == expected
        assert compute_item_discount(100.0, True, True, CustomerType.SENIOR) == expected

    def test_custom_rates(self):
        result = compute_item_discount(
            Decimal("110.00"),
            True,
            True,
            CustomerType.SENIOR,
            vat_rate=Decimal("0.10"),
            discount_rate=Decimal("0.05"),
        )

        assert result.vat_amount == Decimal("10.00")
        assert result.net_of_vat == Decimal("100.00")
        assert result.discount_amount == Decimal("5.00")
        assert result.final_price == Decimal("95.00")

    def test_line_balances_exactly(self):
        for price in ["0.01", "0.99", "13.37", "49.95", "1234.56"]:
            result = compute_item_discount(Decimal(price), True, True, CustomerType.PWD)
            assert (
                result.original_price - result.vat_amount - result.discount_amount
                == result.final_price
            )

    def test_negative_price_rejected(self):
        with pytest.raises(InvalidInputError):
            compute_item_discount(Decimal("-1.00"), True, True, CustomerType.SENIOR)

    @pytest.mark.parametrize("price", ["abc", None, True, float("nan"), "Infinity"])
    def test_non_numeric_price_rejected(self, price):
        with pytest.raises(InvalidInputError):
            compute_item_discount(price, True, True, CustomerType.SENIOR)

    def test_unknown_customer_type_rejected(self):
        with pytest.raises(InvalidInputError, match="Unknown customer type"):
            compute_item_discount(Decimal("100.00"), True, True, "student")

    @pytest.mark.parametrize(
        "vat_rate,discount_rate",
        [("-0.12", "0.20"), ("0.12", "-0.20"), ("0.12", "1.50"), ("abc", "0.20")],
    )
    def test_invalid_rates_rejected(self, vat_rate, discount_rate):
        with pytest.raises(InvalidInputError):
            compute_item_discount(
                Decimal("100.00"),
                True,
                True,
                CustomerType.SENIOR,
                vat_rate=vat_rate,
                discount_rate=discount_rate,
            )

    def test_invalid_input_error_is_value_error(self):
        assert issubclass(InvalidInputError, ValueError)

    def test_deterministic(self):
        first = compute_item_discount(Decimal("57.25"), True, True, CustomerType.SENIOR)
        second = compute_item_discount(Decimal("57.25"), True, True, CustomerType.SENIOR)

        assert first == second

    def test_monotonic_in_price(self):
        prices = [Decimal(p) for p in ["0.00", "1.00", "9.99", "10.00", "100.00", "999.99"]]
        for customer_type in CustomerType.VALUES:
            finals = [
                compute_item_discount(price, True, True, customer_type).final_price
                for price in prices
            ]
            assert finals == sorted(finals)

    def test_outputs_bounded_by_original(self):
        for customer_type in CustomerType.VALUES:
            for flags in [(True, True), (True, False), (False, True), (False, False)]:
                result = compute_item_discount(Decimal("77.77"), *flags, customer_type)
                for amount in (
                    result.net_of_vat,
                    result.vat_amount,
                    result.discount_amount,
                    result.final_price,
                ):
                    assert Decimal("0.00") <= amount <= result.original_price


class TestComputeTransactionDiscount:
    """Cart-level aggregation."""

    def test_senior_cart(self, sample_cart):
        result = compute_transaction_discount(sample_cart, CustomerType.SENIOR)

        assert result.subtotal == Decimal("350.00")
        assert result.total_vat_exempt == Decimal("21.43")
        assert result.total_discount_amount == Decimal("35.71")
        assert result.amount_due == Decimal("292.86")
        assert result.discount_label == "Senior Citizen Discount (20%)"

    def test_line_breakdown(self, sample_cart):
        result = compute_transaction_discount(sample_cart, CustomerType.SENIOR)
        milk, cigarettes = result.items

        assert milk.total_price == Decimal("200.00")
        assert milk.vat_amount == Decimal("21.43")
        assert milk.net_of_vat == Decimal("178.57")
        assert milk.discount_amount == Decimal("35.71")
        assert milk.final_price == Decimal("142.86")
        assert milk.vat_exempt is True
        assert milk.discount_applied is True

        assert cigarettes.total_price == Decimal("150.00")
        assert cigarettes.final_price == Decimal("150.00")
        assert cigarettes.vat_exempt is False
        assert cigarettes.discount_applied is False

    def test_regular_cart_pays_subtotal(self, sample_cart):
        result = compute_transaction_discount(sample_cart, CustomerType.REGULAR)

        assert result.subtotal == Decimal("350.00")
        assert result.total_vat_exempt == Decimal("0.00")
        assert result.total_discount_amount == Decimal("0.00")
        assert result.amount_due == Decimal("350.00")
        assert result.discount_label == ""
        assert result.has_relief is False

    def test_pwd_label(self, sample_cart):
        result = compute_transaction_discount(sample_cart, CustomerType.PWD)

        assert result.discount_label == "PWD Discount (20%)"
        assert result.has_relief is True

    def test_amount_due_invariant(self):
        items = [
            LineItem(str(i), f"Item {i}", Decimal(price), qty)
            for i, (price, qty) in enumerate(
                [("19.99", 3), ("0.33", 7), ("245.50", 1), ("12.34", 11), ("1.01", 2)]
            )
        ]
        for customer_type in CustomerType.VALUES:
            result = compute_transaction_discount(items, customer_type)
            assert result.amount_due == (
                result.subtotal - result.total_vat_exempt - result.total_discount_amount
            )
            assert result.amount_due == sum(item.final_price for item in result.items)

    def test_order_preserved(self, sample_cart):
        result = compute_transaction_discount(list(reversed(sample_cart)), CustomerType.SENIOR)

        assert [item.product_name for item in result.items] == ["Cigarettes", "Milk"]

    def test_inputs_not_mutated(self, sample_cart):
        before = list(sample_cart)
        compute_transaction_discount(sample_cart, CustomerType.SENIOR)

        assert sample_cart == before

    def test_accepts_generator(self, sample_cart):
        result = compute_transaction_discount(
            (item for item in sample_cart), CustomerType.SENIOR
        )

        assert result.amount_due == Decimal("292.86")

    def test_empty_cart(self):
        result = compute_transaction_discount([], CustomerType.SENIOR)

        assert result.subtotal == Decimal("0.00")
        assert result.amount_due == Decimal("0.00")
        assert result.items == ()

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True])
    def test_invalid_quantity_rejected(self, quantity):
        items = [LineItem("x", "Bread", Decimal("50.00"), quantity)]

        with pytest.raises(InvalidInputError):
            compute_transaction_discount(items, CustomerType.SENIOR)

    def test_negative_line_price_rejected(self):
        items = [LineItem("x", "Bread", Decimal("-50.00"), 1)]

        with pytest.raises(InvalidInputError, match="Bread"):
            compute_transaction_discount(items, CustomerType.SENIOR)

    def test_unknown_customer_type_rejected(self, sample_cart):
        with pytest.raises(InvalidInputError):
            compute_transaction_discount(sample_cart, "vip")

    def test_to_dict(self, sample_cart):
        data = compute_transaction_discount(sample_cart, CustomerType.SENIOR).to_dict()

        assert data["amount_due"] == Decimal("292.86")
        assert data["discount_label"] == "Senior Citizen Discount (20%)"
        assert [item["product_name"] for item in data["items"]] == ["Milk", "Cigarettes"]


class TestDiscountLabel:
    def test_labels(self):
        assert get_discount_label(CustomerType.SENIOR) == "Senior Citizen Discount (20%)"
        assert get_discount_label(CustomerType.PWD) == "PWD Discount (20%)"
        assert get_discount_label(CustomerType.REGULAR) == ""

    def test_label_follows_rate(self):
        assert get_discount_label(CustomerType.SENIOR, Decimal("0.25")) == (
            "Senior Citizen Discount (25%)"
        )
        assert get_discount_label(CustomerType.PWD, Decimal("0.125")) == "PWD Discount (12.5%)"


class TestDecimalHelpers:
    def test_quantize_rounds_half_up(self):
        assert quantize(Decimal("0.125")) == Decimal("0.13")
        assert quantize(Decimal("0.124")) == Decimal("0.12")
        assert quantize(Decimal("2.675")) == Decimal("2.68")

    def test_to_decimal_from_float_avoids_binary_noise(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_to_decimal_rejects_bool(self):
        with pytest.raises(InvalidInputError):
            to_decimal(False)
