"""
Catalog models for the grocery POS.

- Products with VAT-inclusive shelf prices and stock levels
- Senior Citizen / PWD eligibility flags per product (alcohol and tobacco,
  for example, are neither discountable nor VAT-exemptable)
- Stock deduction and restoration used by the checkout flow
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.pricing.discounts import LineItem


class Product(models.Model):
    """
    Sellable grocery product.

    ``is_discountable`` and ``is_vat_exemptable`` default to True; products
    excluded by law have them switched off in the catalog.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    DISCONTINUED = "discontinued"

    STATUS_CHOICES = [
        (ACTIVE, "Active"),
        (INACTIVE, "Inactive"),
        (DISCONTINUED, "Discontinued"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the product",
    )

    sku = models.CharField(
        max_length=100,
        unique=True,
        help_text="Stock Keeping Unit",
    )

    barcode = models.CharField(
        max_length=100,
        blank=True,
        db_index=True,
        help_text="EAN/UPC barcode printed on the package",
    )

    name = models.CharField(
        max_length=255,
        help_text="Product name (e.g., 'Fresh Milk 1L')",
    )

    category = models.CharField(
        max_length=100,
        blank=True,
        help_text="Product category (e.g., 'Dairy', 'Beverages')",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="VAT-inclusive selling price",
    )

    stock = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Units on hand",
    )

    min_stock = models.IntegerField(
        default=5,
        validators=[MinValueValidator(0)],
        help_text="Reorder threshold",
    )

    # Senior Citizen / PWD eligibility
    is_discountable = models.BooleanField(
        default=True,
        help_text="Eligible for the Senior Citizen / PWD 20% discount",
    )

    is_vat_exemptable = models.BooleanField(
        default=True,
        help_text="Eligible for VAT exemption for Senior Citizen / PWD customers",
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=ACTIVE,
        help_text="Only active products can be sold",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        indexes = [
            models.Index(fields=["status"], name="product_status_idx"),
            models.Index(fields=["category", "status"], name="product_cat_status_idx"),
        ]

    def __str__(self):
        return f"{self.sku} - {self.name}"

    @property
    def is_active(self):
        return self.status == self.ACTIVE

    def is_low_stock(self):
        return self.stock <= self.min_stock

    def is_out_of_stock(self):
        return self.stock <= 0

    def can_deduct_quantity(self, quantity):
        """Check if we can deduct the specified quantity."""
        return self.stock >= quantity

    def deduct_quantity(self, quantity):
        """
        Deduct sold units from stock.

        Raises:
            ValueError: If insufficient stock
        """
        if not self.can_deduct_quantity(quantity):
            raise ValueError(
                f"Insufficient stock for {self.name}. "
                f"Available: {self.stock}, Requested: {quantity}"
            )
        self.stock -= quantity
        self.save(update_fields=["stock", "updated_at"])

    def add_quantity(self, quantity):
        """Return units to stock (refunds and voids)."""
        self.stock += quantity
        self.save(update_fields=["stock", "updated_at"])

    def to_line_item(self, quantity, unit_price=None):
        """Build a discount engine line item for ``quantity`` units of this product."""
        return LineItem(
            product_id=str(self.id),
            name=self.name,
            unit_price=self.price if unit_price is None else unit_price,
            quantity=quantity,
            is_discountable=self.is_discountable,
            is_vat_exemptable=self.is_vat_exemptable,
        )
