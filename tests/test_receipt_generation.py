"""
Tests for receipt generation.

Covers the PDF formats, the plain-text receipt and the Senior Citizen / PWD
lines printed on both.
"""

from decimal import Decimal

import pytest

from apps.sales.models import Transaction
from apps.sales.receipt_service import ReceiptGenerator, ReceiptService, get_store_info


@pytest.mark.django_db
class TestReceiptGenerator:
    def test_summary_lines_for_senior(self, senior_transaction):
        generator = ReceiptGenerator(senior_transaction)

        assert generator.summary_lines() == [
            ("Subtotal", Decimal("350.00")),
            ("Less: VAT Exempt", Decimal("-21.43")),
            ("Less: Senior Citizen Discount (20%)", Decimal("-35.71")),
        ]

    def test_summary_lines_without_relief(self, senior_transaction):
        senior_transaction.customer_type = "regular"
        senior_transaction.total_vat_exempt = Decimal("0.00")
        senior_transaction.total_discount = Decimal("0.00")

        lines = ReceiptGenerator(senior_transaction).summary_lines()

        assert lines == [("Subtotal", Decimal("350.00"))]

    def test_vat_lines(self, senior_transaction):
        lines = ReceiptGenerator(senior_transaction).vat_lines()

        assert lines == [
            ("VATable Sales", Decimal("133.93")),
            ("VAT-Exempt Sales", Decimal("142.86")),
            ("VAT (12%)", Decimal("16.07")),
        ]

    def test_payment_lines_for_cash(self, senior_transaction):
        lines = ReceiptGenerator(senior_transaction).payment_lines()

        assert lines == [
            ("Payment", "Cash"),
            ("Cash", Decimal("500.00")),
            ("Change", Decimal("207.14")),
        ]

    def test_customer_lines(self, senior_transaction):
        lines = ReceiptGenerator(senior_transaction).customer_lines()

        assert lines == ["Customer Type: Senior Citizen", "Customer: Lola Remedios"]

    def test_text_receipt(self, senior_transaction):
        text = ReceiptGenerator(senior_transaction).generate_text_receipt()

        assert "Test Grocery" in text
        assert "TIN: 000-123-456-000" in text
        assert senior_transaction.transaction_number in text
        assert "Customer Type: Senior Citizen" in text
        assert "Less: VAT Exempt" in text
        assert "-₱21.43" in text
        assert "Less: Senior Citizen Discount (20%)" in text
        assert "-₱35.71" in text
        assert "VAT (12%)" in text
        assert "REFUNDED" not in text

        amount_due = [line for line in text.splitlines() if line.startswith("AMOUNT DUE")]
        assert amount_due == ["AMOUNT DUE" + " " * 23 + "₱292.86"]

    def test_text_receipt_marks_refund(self, senior_transaction):
        senior_transaction.mark_as_refunded()

        text = ReceiptGenerator(senior_transaction).generate_text_receipt()

        assert "*** REFUNDED ***" in text

    def test_pdf_standard(self, senior_transaction):
        pdf = ReceiptGenerator(senior_transaction).generate_pdf_receipt("standard")

        assert pdf.startswith(b"%PDF")

    def test_pdf_thermal(self, senior_transaction):
        pdf = ReceiptGenerator(senior_transaction).generate_pdf_receipt("thermal")

        assert pdf.startswith(b"%PDF")

    def test_pdf_escapes_markup_in_names(self, senior_transaction):
        senior_transaction.customer_name = "<b>Lola & Lolo</b>"

        pdf = ReceiptGenerator(senior_transaction).generate_pdf_receipt()

        assert pdf.startswith(b"%PDF")


@pytest.mark.django_db
class TestReceiptService:
    def test_text_output_is_utf8(self, senior_transaction):
        receipt = ReceiptService.generate_receipt(senior_transaction, output_format="text")

        assert "₱292.86" in receipt.decode("utf-8")

    def test_unknown_format_type(self, senior_transaction):
        with pytest.raises(ValueError, match="Unsupported receipt format"):
            ReceiptService.generate_receipt(senior_transaction, format_type="letter")

    def test_unknown_output_format(self, senior_transaction):
        with pytest.raises(ValueError, match="Unsupported output format"):
            ReceiptService.generate_receipt(senior_transaction, output_format="html")

    def test_card_payment_has_no_cash_lines(self):
        sale = Transaction.objects.create(
            cashier_name="Maria",
            payment_method=Transaction.CARD,
            subtotal=Decimal("100.00"),
            amount_due=Decimal("100.00"),
        )

        assert ReceiptGenerator(sale).payment_lines() == [("Payment", "Card")]


def test_store_info_defaults(settings):
    del settings.POS_RECEIPT

    info = get_store_info()

    assert info == {"NAME": "Grocery POS", "ADDRESS": "", "TIN": ""}
