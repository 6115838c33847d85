"""
Tests for the Transaction and TransactionItem models.
"""

import logging
from decimal import Decimal
from unittest.mock import patch

from django.db import IntegrityError
from django.utils import timezone

import pytest

from apps.pricing.discounts import CustomerType
from apps.sales.models import Transaction, TransactionItem


def make_transaction(**kwargs):
    defaults = {
        "cashier_name": "Maria",
        "subtotal": Decimal("100.00"),
        "amount_due": Decimal("100.00"),
    }
    defaults.update(kwargs)
    return Transaction.objects.create(**defaults)


@pytest.mark.django_db
class TestTransactionNumber:
    def test_first_number_of_the_day(self):
        sale = make_transaction()

        today = timezone.localdate().strftime("%Y%m%d")
        assert sale.transaction_number == f"TXN{today}000001"

    def test_numbers_increment(self):
        first = make_transaction()
        second = make_transaction()

        assert int(second.transaction_number[-6:]) == int(first.transaction_number[-6:]) + 1

    def test_explicit_number_kept(self):
        sale = make_transaction(transaction_number="TXN-MANUAL-1")

        assert sale.transaction_number == "TXN-MANUAL-1"

    def test_str(self):
        sale = make_transaction(amount_due=Decimal("292.86"))

        assert str(sale) == f"{sale.transaction_number} - 292.86"


@pytest.mark.django_db
class TestTransactionProperties:
    def test_discount_label_uses_stored_rate(self):
        sale = make_transaction(customer_type=CustomerType.PWD, discount_rate=Decimal("20.00"))

        assert sale.discount_label == "PWD Discount (20%)"

    def test_discount_label_blank_for_regular(self):
        assert make_transaction().discount_label == ""

    def test_item_count_sums_quantities(self, senior_transaction):
        assert senior_transaction.item_count == 3

    def test_line_items_in_cart_order(self, senior_transaction):
        names = [item.product_name for item in senior_transaction.items.all()]

        assert names == ["Milk", "Cigarettes"]

    def test_line_breakdown_persisted(self, senior_transaction):
        milk_line = senior_transaction.items.get(line_number=1)

        assert milk_line.total_price == Decimal("200.00")
        assert milk_line.vat_amount == Decimal("21.43")
        assert milk_line.discount_amount == Decimal("35.71")
        assert milk_line.final_price == Decimal("142.86")
        assert milk_line.vat_exempt is True
        assert milk_line.discount_applied is True

    def test_vat_summary_persisted(self, senior_transaction):
        assert senior_transaction.vatable_sales == Decimal("133.93")
        assert senior_transaction.vat_exempt_sales == Decimal("142.86")
        assert senior_transaction.vat_amount == Decimal("16.07")
        assert senior_transaction.vat_rate == Decimal("12.00")
        assert senior_transaction.discount_rate == Decimal("20.00")

    def test_duplicate_line_number_rejected(self, senior_transaction):
        with pytest.raises(IntegrityError):
            TransactionItem.objects.create(
                transaction=senior_transaction,
                line_number=1,
                product_name="Bread",
                quantity=1,
                unit_price=Decimal("50.00"),
                total_price=Decimal("50.00"),
                final_price=Decimal("50.00"),
            )


@pytest.mark.django_db
class TestTransactionLifecycle:
    def test_refund(self, senior_transaction, milk, cigarettes):
        senior_transaction.mark_as_refunded("Wrong item")

        senior_transaction.refresh_from_db()
        milk.refresh_from_db()
        cigarettes.refresh_from_db()
        assert senior_transaction.status == Transaction.REFUNDED
        assert senior_transaction.notes == "Refund reason: Wrong item"
        assert milk.stock == 50
        assert cigarettes.stock == 20

    def test_void_appends_reason_to_notes(self, senior_transaction):
        senior_transaction.notes = "Bagged separately"
        senior_transaction.save()

        senior_transaction.mark_as_voided("Customer left")

        assert senior_transaction.status == Transaction.VOIDED
        assert senior_transaction.notes == "Bagged separately\nVoid reason: Customer left"

    def test_only_completed_can_change(self, senior_transaction):
        senior_transaction.mark_as_voided()

        assert not senior_transaction.can_be_refunded()
        with pytest.raises(ValueError, match="Only completed transactions can be refunded"):
            senior_transaction.mark_as_refunded()
        with pytest.raises(ValueError, match="Only completed transactions can be voided"):
            senior_transaction.mark_as_voided()

    def test_refund_skips_deleted_products(self, senior_transaction, cigarettes):
        cigarettes.delete()

        senior_transaction.mark_as_refunded()

        assert senior_transaction.status == Transaction.REFUNDED
        assert senior_transaction.items.filter(product__isnull=True).count() == 1

    def test_stale_instance_cannot_restock_twice(self, senior_transaction, milk):
        stale = Transaction.objects.get(pk=senior_transaction.pk)
        senior_transaction.mark_as_refunded()

        with pytest.raises(ValueError, match="Only completed transactions can be voided"):
            stale.mark_as_voided()

        milk.refresh_from_db()
        assert milk.stock == 50
        assert stale.status == Transaction.REFUNDED

    def test_stale_double_refund_restocks_once(self, senior_transaction, milk, cigarettes):
        first = Transaction.objects.get(pk=senior_transaction.pk)
        second = Transaction.objects.get(pk=senior_transaction.pk)

        first.mark_as_refunded("Spoiled")
        with pytest.raises(ValueError):
            second.mark_as_refunded("Spoiled")

        milk.refresh_from_db()
        cigarettes.refresh_from_db()
        assert milk.stock == 50
        assert cigarettes.stock == 20
        assert Transaction.objects.get(pk=senior_transaction.pk).notes == "Refund reason: Spoiled"


@pytest.mark.django_db
class TestTransactionNumberCollisions:
    def test_collision_retries_with_fresh_number(self, caplog):
        existing = make_transaction()
        caplog.set_level(logging.WARNING, logger="apps.sales.models")

        with patch.object(
            Transaction,
            "generate_transaction_number",
            side_effect=[existing.transaction_number, "TXN-RETRY-000002"],
        ):
            sale = make_transaction()

        assert sale.transaction_number == "TXN-RETRY-000002"
        assert Transaction.objects.count() == 2
        assert "already taken" in caplog.text

    def test_gives_up_after_repeated_collisions(self):
        existing = make_transaction()

        with patch.object(
            Transaction,
            "generate_transaction_number",
            return_value=existing.transaction_number,
        ) as generate:
            with pytest.raises(IntegrityError):
                make_transaction()

        assert generate.call_count == Transaction.NUMBER_ATTEMPTS
        assert Transaction.objects.count() == 1
