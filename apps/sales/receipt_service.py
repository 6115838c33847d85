"""
Receipt generation service for the grocery POS.

- PDF receipts in standard (A4) and thermal (80mm) formats
- Plain-text receipts for terminal printers and previews
- Senior Citizen / PWD lines: discount label, less VAT exempt, less discount
- VAT summary: VATable sales, VAT-exempt sales, VAT amount
"""

import io
import logging

from django.conf import settings
from django.utils import timezone
from django.utils.html import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch, mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.flowables import HRFlowable

from apps.core.formatting_utils import format_currency, format_percentage
from apps.pricing.discounts import CustomerType

from .models import Transaction

logger = logging.getLogger(__name__)

DEFAULT_STORE_INFO = {
    "NAME": "Grocery POS",
    "ADDRESS": "",
    "TIN": "",
}

FORMAT_TYPES = ("standard", "thermal")


def get_store_info():
    info = dict(DEFAULT_STORE_INFO)
    info.update(getattr(settings, "POS_RECEIPT", {}) or {})
    return info


def _pdf_money(amount):
    # Base-14 PDF fonts have no peso glyph
    return format_currency(amount, use_symbol=False)


class ReceiptGenerator:
    """
    Receipt generator for checkout transactions.

    Supports:
    - PDF receipts (standard A4 and 80mm thermal)
    - Plain-text receipts with a fixed character width
    """

    THERMAL_WIDTH = 80 * mm
    THERMAL_MARGIN = 5 * mm
    STANDARD_MARGIN = 20 * mm

    TEXT_WIDTH = 40

    def __init__(self, sale: Transaction):
        self.sale = sale
        self.store = get_store_info()
        self.items = list(sale.items.all())
        self.styles = getSampleStyleSheet()
        self._create_custom_styles()

    def _create_custom_styles(self):
        self.header_style = ParagraphStyle(
            "ReceiptHeader",
            parent=self.styles["Heading1"],
            fontSize=16,
            spaceAfter=8,
            alignment=1,
            fontName="Helvetica-Bold",
        )
        self.thermal_header_style = ParagraphStyle(
            "ThermalHeader",
            parent=self.header_style,
            fontSize=12,
            spaceAfter=4,
        )
        self.body_style = ParagraphStyle(
            "ReceiptBody",
            parent=self.styles["Normal"],
            fontSize=10,
            spaceAfter=4,
            textColor=colors.black,
        )
        self.thermal_body_style = ParagraphStyle(
            "ThermalBody",
            parent=self.body_style,
            fontSize=7,
            spaceAfter=2,
        )

    # Shared content

    def summary_lines(self):
        """
        ``(label, amount)`` pairs printed below the item list.

        Relief lines only appear when the customer received them.
        """
        sale = self.sale
        lines = [("Subtotal", sale.subtotal)]
        if sale.total_vat_exempt > 0:
            lines.append(("Less: VAT Exempt", -sale.total_vat_exempt))
        if sale.total_discount > 0:
            lines.append((f"Less: {sale.discount_label}", -sale.total_discount))
        return lines

    def vat_lines(self):
        return [
            ("VATable Sales", self.sale.vatable_sales),
            ("VAT-Exempt Sales", self.sale.vat_exempt_sales),
            (f"VAT ({format_percentage(self.sale.vat_rate)})", self.sale.vat_amount),
        ]

    def payment_lines(self):
        sale = self.sale
        lines = [("Payment", sale.get_payment_method_display())]
        if sale.payment_method == Transaction.CASH and sale.cash_received is not None:
            lines.append(("Cash", sale.cash_received))
            lines.append(("Change", sale.change_due))
        return lines

    def customer_lines(self):
        sale = self.sale
        lines = []
        if sale.customer_type != CustomerType.REGULAR:
            lines.append(f"Customer Type: {sale.get_customer_type_display()}")
        if sale.customer_name:
            lines.append(f"Customer: {sale.customer_name}")
        return lines

    # PDF

    def generate_pdf_receipt(self, format_type: str = "standard") -> bytes:
        """
        Generate PDF receipt.

        Args:
            format_type: 'standard' for A4, 'thermal' for 80mm paper

        Returns:
            PDF bytes
        """
        thermal = format_type == "thermal"
        buffer = io.BytesIO()

        if thermal:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=(self.THERMAL_WIDTH, 11 * inch),
                rightMargin=self.THERMAL_MARGIN,
                leftMargin=self.THERMAL_MARGIN,
                topMargin=self.THERMAL_MARGIN,
                bottomMargin=self.THERMAL_MARGIN,
            )
        else:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                rightMargin=self.STANDARD_MARGIN,
                leftMargin=self.STANDARD_MARGIN,
                topMargin=self.STANDARD_MARGIN,
                bottomMargin=self.STANDARD_MARGIN,
            )

        doc.build(self._build_pdf_content(thermal))
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _build_pdf_content(self, thermal: bool):
        story = []
        header_style = self.thermal_header_style if thermal else self.header_style
        body_style = self.thermal_body_style if thermal else self.body_style
        gap = 6 if thermal else 12

        story.append(Paragraph(escape(self.store["NAME"]), header_style))
        for info in (self.store["ADDRESS"], self.store["TIN"] and f"TIN: {self.store['TIN']}"):
            if info:
                story.append(Paragraph(f"<para align='center'>{escape(info)}</para>", body_style))
        story.append(HRFlowable(width="100%", thickness=1, color=colors.black))
        story.append(Spacer(1, gap))

        sale_info = [
            f"Receipt #: {self.sale.transaction_number}",
            f"Date: {timezone.localtime(self.sale.created_at).strftime('%Y-%m-%d %H:%M:%S')}",
            f"Cashier: {self.sale.cashier_name}",
        ] + self.customer_lines()
        if self.sale.status != Transaction.COMPLETED:
            sale_info.append(f"Status: {self.sale.get_status_display().upper()}")
        for info in sale_info:
            story.append(Paragraph(escape(info), body_style))
        story.append(Spacer(1, gap))

        story.append(self._build_items_table(thermal))
        story.append(Spacer(1, gap))

        story.append(self._build_amounts_table(self.summary_lines(), thermal))
        story.append(HRFlowable(width="100%", thickness=2, color=colors.black))
        story.append(
            self._build_amounts_table([("AMOUNT DUE", self.sale.amount_due)], thermal, bold=True)
        )
        story.append(Spacer(1, gap))
        story.append(self._build_amounts_table(self.vat_lines(), thermal))
        story.append(Spacer(1, gap))
        story.append(self._build_amounts_table(self.payment_lines(), thermal))
        story.append(Spacer(1, gap))

        story.append(HRFlowable(width="100%", thickness=1, color=colors.black))
        story.append(
            Paragraph("<para align='center'>Thank you for shopping with us!</para>", body_style)
        )
        return story

    def _build_items_table(self, thermal: bool):
        if thermal:
            data = [["Item", "Qty", "Amount"]]
            col_widths = [40 * mm, 8 * mm, 22 * mm]
            font_size = 7
        else:
            data = [["Item", "Qty", "Unit Price", "VAT Exempt", "Discount", "Amount"]]
            col_widths = [55 * mm, 15 * mm, 25 * mm, 25 * mm, 25 * mm, 25 * mm]
            font_size = 9

        for item in self.items:
            if thermal:
                name = item.product_name[:22] + ("..." if len(item.product_name) > 22 else "")
                data.append([name, str(item.quantity), _pdf_money(item.final_price)])
            else:
                data.append(
                    [
                        item.product_name,
                        str(item.quantity),
                        _pdf_money(item.unit_price),
                        _pdf_money(item.vat_amount) if item.vat_exempt else "-",
                        _pdf_money(item.discount_amount) if item.discount_applied else "-",
                        _pdf_money(item.final_price),
                    ]
                )

        table = Table(data, colWidths=col_widths)
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 0), (-1, -1), font_size),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        return table

    def _build_amounts_table(self, lines, thermal: bool, bold: bool = False):
        data = [
            [label, value if isinstance(value, str) else _pdf_money(value)]
            for label, value in lines
        ]
        col_widths = [45 * mm, 25 * mm] if thermal else [120 * mm, 50 * mm]
        font = "Helvetica-Bold" if bold else "Helvetica"
        font_size = (8 if thermal else 10) + (2 if bold else 0)
        table = Table(data, colWidths=col_widths)
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (-1, -1), font),
                    ("FONTSIZE", (0, 0), (-1, -1), font_size),
                    ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ]
            )
        )
        return table

    # Plain text

    def _text_row(self, label, value):
        value_text = value if isinstance(value, str) else format_currency(value)
        padding = max(self.TEXT_WIDTH - len(label) - len(value_text), 1)
        return f"{label}{' ' * padding}{value_text}"

    def generate_text_receipt(self) -> str:
        """Generate a fixed-width plain-text receipt."""
        rule = "-" * self.TEXT_WIDTH
        sale = self.sale
        lines = [self.store["NAME"].center(self.TEXT_WIDTH).rstrip()]
        if self.store["ADDRESS"]:
            lines.append(self.store["ADDRESS"].center(self.TEXT_WIDTH).rstrip())
        if self.store["TIN"]:
            lines.append(f"TIN: {self.store['TIN']}".center(self.TEXT_WIDTH).rstrip())
        lines.append(rule)
        lines.append(f"Receipt #: {sale.transaction_number}")
        lines.append(
            f"Date: {timezone.localtime(sale.created_at).strftime('%Y-%m-%d %H:%M:%S')}"
        )
        lines.append(f"Cashier: {sale.cashier_name}")
        lines.extend(self.customer_lines())
        if sale.status != Transaction.COMPLETED:
            lines.append(f"*** {sale.get_status_display().upper()} ***")
        lines.append(rule)

        for item in self.items:
            lines.append(item.product_name[: self.TEXT_WIDTH])
            lines.append(
                self._text_row(
                    f"  {item.quantity} x {format_currency(item.unit_price)}", item.total_price
                )
            )
            if item.vat_exempt:
                lines.append(self._text_row("  VAT Exempt", -item.vat_amount))
            if item.discount_applied:
                lines.append(self._text_row("  Discount", -item.discount_amount))

        lines.append(rule)
        lines.extend(self._text_row(label, value) for label, value in self.summary_lines())
        lines.append(self._text_row("AMOUNT DUE", sale.amount_due))
        lines.append(rule)
        lines.extend(self._text_row(label, value) for label, value in self.vat_lines())
        lines.append(rule)
        lines.extend(self._text_row(label, value) for label, value in self.payment_lines())
        lines.append(rule)
        lines.append("Thank you for shopping with us!".center(self.TEXT_WIDTH).rstrip())
        return "\n".join(lines) + "\n"


class ReceiptService:
    """High-level interface for receipt generation."""

    @staticmethod
    def generate_receipt(
        sale: Transaction, format_type: str = "standard", output_format: str = "pdf"
    ) -> bytes:
        """
        Generate receipt for a transaction.

        Args:
            sale: Transaction instance
            format_type: 'standard' or 'thermal' (PDF only)
            output_format: 'pdf' or 'text'

        Returns:
            Receipt bytes (PDF, or UTF-8 text)

        Raises:
            ValueError: If the format type or output format is not supported
        """
        if format_type not in FORMAT_TYPES:
            raise ValueError(f"Unsupported receipt format: {format_type}")

        generator = ReceiptGenerator(sale)

        if output_format == "pdf":
            receipt = generator.generate_pdf_receipt(format_type)
        elif output_format == "text":
            receipt = generator.generate_text_receipt().encode("utf-8")
        else:
            raise ValueError(f"Unsupported output format: {output_format}")

        logger.debug(
            "Generated %s %s receipt for %s", format_type, output_format, sale.transaction_number
        )
        return receipt
