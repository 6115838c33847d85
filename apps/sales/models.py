"""
Sales models for the grocery POS.

- Completed checkout transactions with the Senior Citizen / PWD breakdown
  (subtotal, VAT exempted, statutory discount, amount due)
- Receipt VAT summary (VATable sales, VAT-exempt sales, VAT amount)
- Cash tendered and change
- Refund and void lifecycle with stock restoration
- Line items stored in the order the cashier scanned them
"""

import logging
import uuid
from decimal import Decimal

from django.core.validators import MaxLengthValidator, MinValueValidator
from django.db import IntegrityError, models, transaction
from django.utils import timezone

from apps.inventory.models import Product
from apps.pricing.discounts import CustomerType, get_discount_label

logger = logging.getLogger(__name__)


class Transaction(models.Model):
    """
    Checkout transaction.

    Amounts are copied from the discount engine result at checkout time and
    never recomputed, so receipts can be reprinted after rates change.
    """

    # Payment method choices
    CASH = "cash"
    CARD = "card"
    DIGITAL = "digital"

    PAYMENT_METHOD_CHOICES = [
        (CASH, "Cash"),
        (CARD, "Card"),
        (DIGITAL, "Digital Wallet"),
    ]

    # Status choices
    COMPLETED = "completed"
    REFUNDED = "refunded"
    VOIDED = "voided"

    STATUS_CHOICES = [
        (COMPLETED, "Completed"),
        (REFUNDED, "Refunded"),
        (VOIDED, "Voided"),
    ]

    NUMBER_ATTEMPTS = 5

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the transaction",
    )

    transaction_number = models.CharField(
        max_length=30,
        unique=True,
        help_text="Receipt number (e.g., 'TXN20241102000001')",
    )

    customer_type = models.CharField(
        max_length=20,
        choices=CustomerType.CHOICES,
        default=CustomerType.REGULAR,
        help_text="Customer classification used for Senior Citizen / PWD relief",
    )

    customer_name = models.CharField(max_length=255, blank=True)

    cashier_name = models.CharField(
        max_length=255,
        help_text="Cashier who processed the transaction",
    )

    # Discount breakdown
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Sum of unit price x quantity before any relief",
    )

    total_vat_exempt = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="VAT removed for Senior Citizen / PWD eligible items",
    )

    total_discount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Senior Citizen / PWD discount",
    )

    amount_due = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Subtotal less VAT exemption and discount",
    )

    # Receipt VAT summary
    vatable_sales = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Net-of-VAT amount of lines that still carry VAT",
    )

    vat_exempt_sales = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Amount due on VAT-exempted lines",
    )

    vat_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="VAT contained in the amount due",
    )

    vat_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("12.00"),
        help_text="VAT rate (percent) in force at checkout",
    )

    discount_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("20.00"),
        help_text="Senior Citizen / PWD discount rate (percent) in force at checkout",
    )

    # Payment
    payment_method = models.CharField(
        max_length=20,
        choices=PAYMENT_METHOD_CHOICES,
        default=CASH,
    )

    cash_received = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Cash tendered (cash payments only)",
    )

    change_due = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Change returned to the customer",
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=COMPLETED,
    )

    notes = models.TextField(
        blank=True,
        validators=[MaxLengthValidator(500)],
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "transactions"
        ordering = ["-created_at"]
        verbose_name = "Transaction"
        verbose_name_plural = "Transactions"
        indexes = [
            models.Index(fields=["status", "-created_at"], name="txn_status_date_idx"),
            models.Index(fields=["customer_type"], name="txn_customer_type_idx"),
            models.Index(fields=["payment_method"], name="txn_payment_idx"),
            models.Index(fields=["cashier_name", "-created_at"], name="txn_cashier_date_idx"),
        ]

    def __str__(self):
        return f"{self.transaction_number} - {self.amount_due}"

    def save(self, *args, **kwargs):
        if self.transaction_number:
            super().save(*args, **kwargs)
            return

        # Concurrent checkouts can draw the same sequence; retry on collision
        for attempt in range(1, self.NUMBER_ATTEMPTS + 1):
            self.transaction_number = self.generate_transaction_number()
            try:
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError:
                taken = type(self).objects.filter(
                    transaction_number=self.transaction_number
                ).exists()
                if not taken or attempt == self.NUMBER_ATTEMPTS:
                    self.transaction_number = ""
                    raise
                logger.warning(
                    "Transaction number %s already taken, retrying (attempt %d)",
                    self.transaction_number,
                    attempt,
                )

    @classmethod
    def generate_transaction_number(cls):
        """
        Next receipt number for today: ``TXN`` + ``YYYYMMDD`` + 6-digit sequence.
        """
        prefix = f"TXN{timezone.localdate().strftime('%Y%m%d')}"
        last = (
            cls.objects.filter(transaction_number__startswith=prefix)
            .order_by("-transaction_number")
            .values_list("transaction_number", flat=True)
            .first()
        )
        sequence = 1
        if last:
            try:
                sequence = int(last[len(prefix):]) + 1
            except ValueError:
                sequence = cls.objects.filter(transaction_number__startswith=prefix).count() + 1
        return f"{prefix}{sequence:06d}"

    @property
    def discount_label(self):
        return get_discount_label(self.customer_type, self.discount_rate / 100)

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items.all())

    def can_be_refunded(self):
        return self.status == self.COMPLETED

    def can_be_voided(self):
        return self.status == self.COMPLETED

    def _restock(self):
        returned = {}
        for item in self.items.exclude(product__isnull=True):
            returned[item.product_id] = returned.get(item.product_id, 0) + item.quantity
        for product in Product.objects.select_for_update().filter(id__in=returned):
            product.add_quantity(returned[product.id])

    def _close(self, new_status, reason_label, reason):
        # Status check and restock happen under the row lock
        locked = type(self).objects.select_for_update().get(pk=self.pk)
        if locked.status != self.COMPLETED:
            self.status = locked.status
            raise ValueError(
                f"Only completed transactions can be {new_status}; "
                f"{locked.transaction_number} is {locked.status}"
            )

        locked._restock()
        locked.status = new_status
        if reason:
            locked.notes = f"{locked.notes}\n{reason_label}: {reason}".strip()
        locked.save(update_fields=["status", "notes", "updated_at"])

        self.status = locked.status
        self.notes = locked.notes
        self.updated_at = locked.updated_at

    @transaction.atomic
    def mark_as_refunded(self, reason=""):
        """
        Refund the transaction and return its items to stock.

        Raises:
            ValueError: If the transaction is not completed
        """
        self._close(self.REFUNDED, "Refund reason", reason)

    @transaction.atomic
    def mark_as_voided(self, reason=""):
        """
        Void the transaction and return its items to stock.

        Raises:
            ValueError: If the transaction is not completed
        """
        self._close(self.VOIDED, "Void reason", reason)


class TransactionItem(models.Model):
    """
    One cart line of a transaction with its Senior Citizen / PWD breakdown.

    Product name and unit price are copied so receipts stay correct if the
    catalog changes later.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transaction_items",
    )

    line_number = models.PositiveIntegerField(
        help_text="Position in the cart, starting at 1",
    )

    product_name = models.CharField(max_length=255)

    quantity = models.IntegerField(validators=[MinValueValidator(1)])

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="VAT-inclusive unit price at time of sale",
    )

    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="unit_price x quantity, before relief",
    )

    vat_exempt = models.BooleanField(default=False)
    discount_applied = models.BooleanField(default=False)

    vat_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="VAT removed from this line",
    )

    discount_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Senior Citizen / PWD discount on this line",
    )

    final_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount due for this line",
    )

    class Meta:
        db_table = "transaction_items"
        ordering = ["transaction", "line_number"]
        verbose_name = "Transaction Item"
        verbose_name_plural = "Transaction Items"
        unique_together = [["transaction", "line_number"]]

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
