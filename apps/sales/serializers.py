"""
Serializers for the sales app.

- Cart input for live totals and checkout
- Transaction creation with Senior Citizen / PWD pricing and stock deduction
- Transaction detail and list output
"""

import logging
from decimal import Decimal

from django.db import transaction

from rest_framework import serializers

from apps.inventory.models import Product
from apps.pricing.discounts import CustomerType
from apps.pricing.services import CheckoutPricingService, get_cash_limit

from .models import Transaction, TransactionItem

logger = logging.getLogger(__name__)


class CheckoutItemSerializer(serializers.Serializer):
    """One cart line as sent by the POS terminal."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )


class CalculateTotalsSerializer(serializers.Serializer):
    """Cart and customer type for a live totals preview."""

    items = CheckoutItemSerializer(many=True)
    customer_type = serializers.ChoiceField(
        choices=CustomerType.CHOICES, default=CustomerType.REGULAR
    )

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value


def load_cart_products(items_data, lock=False):
    """
    Resolve cart lines to ``(product, quantity, unit_price)`` tuples.

    A product scanned on several lines resolves to the same instance.

    Raises:
        ValueError: If a product does not exist or is not active
    """
    queryset = Product.objects.all()
    if lock:
        queryset = queryset.select_for_update()

    products = {}
    lines = []
    for item_data in items_data:
        product_id = item_data["product_id"]
        if product_id not in products:
            try:
                products[product_id] = queryset.get(id=product_id)
            except Product.DoesNotExist:
                raise ValueError(f"Product {product_id} not found")
        product = products[product_id]
        if not product.is_active:
            raise ValueError(f"{product.name} is not available for sale")
        lines.append((product, item_data["quantity"], item_data.get("unit_price")))
    return lines


class TransactionCreateSerializer(serializers.Serializer):
    """
    Serializer for completing a checkout.

    Handles:
    - Senior Citizen / PWD pricing of the cart
    - Cash tendered and change validation
    - Stock deduction with row locking
    - Transaction and line item persistence
    """

    items = CheckoutItemSerializer(many=True)
    customer_type = serializers.ChoiceField(
        choices=CustomerType.CHOICES, default=CustomerType.REGULAR
    )
    customer_name = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )
    cashier_name = serializers.CharField(max_length=255)
    payment_method = serializers.ChoiceField(
        choices=Transaction.PAYMENT_METHOD_CHOICES, default=Transaction.CASH
    )
    cash_received = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )
    notes = serializers.CharField(
        max_length=500, required=False, allow_blank=True, default=""
    )

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value

    def validate(self, attrs):
        if attrs["payment_method"] == Transaction.CASH:
            cash_received = attrs.get("cash_received")
            if cash_received is None:
                raise serializers.ValidationError(
                    {"cash_received": "Cash received is required for cash payments."}
                )
            cash_limit = get_cash_limit()
            if cash_received > cash_limit:
                raise serializers.ValidationError(
                    {"cash_received": f"Cash received cannot exceed {cash_limit}."}
                )
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        """
        Price the cart, deduct stock and record the transaction.

        Raises:
            ValueError: If a product is missing, inactive or short on stock,
                or the cash tendered does not cover the amount due
        """
        items_data = validated_data.pop("items")
        customer_type = validated_data["customer_type"]
        payment_method = validated_data["payment_method"]

        lines = load_cart_products(items_data, lock=True)

        # Aggregate per product so a product scanned twice is checked once
        requested = {}
        for product, quantity, _ in lines:
            requested[product.id] = requested.get(product.id, 0) + quantity
        for product, _, _ in lines:
            if not product.can_deduct_quantity(requested[product.id]):
                raise ValueError(
                    f"Insufficient stock for {product.name}. "
                    f"Available: {product.stock}, Requested: {requested[product.id]}"
                )

        pricing = CheckoutPricingService()
        result = pricing.calculate_for_products(lines, customer_type)
        summary = pricing.vat_summary(result)

        cash_received = validated_data.pop("cash_received", None)
        change_due = Decimal("0.00")
        if payment_method == Transaction.CASH:
            if cash_received < result.amount_due:
                raise ValueError(
                    f"Cash received ({cash_received}) is less than the amount due "
                    f"({result.amount_due})"
                )
            change_due = cash_received - result.amount_due
        else:
            cash_received = None

        sale = Transaction.objects.create(
            subtotal=result.subtotal,
            total_vat_exempt=result.total_vat_exempt,
            total_discount=result.total_discount_amount,
            amount_due=result.amount_due,
            vatable_sales=summary.vatable_sales,
            vat_exempt_sales=summary.vat_exempt_sales,
            vat_amount=summary.vat_amount,
            vat_rate=pricing.vat_rate_percent,
            discount_rate=pricing.discount_rate_percent,
            cash_received=cash_received,
            change_due=change_due,
            **validated_data,
        )

        for line_number, ((product, quantity, _), line) in enumerate(
            zip(lines, result.items), start=1
        ):
            TransactionItem.objects.create(
                transaction=sale,
                product=product,
                line_number=line_number,
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=line.total_price,
                vat_exempt=line.vat_exempt,
                discount_applied=line.discount_applied,
                vat_amount=line.vat_amount,
                discount_amount=line.discount_amount,
                final_price=line.final_price,
            )
            product.deduct_quantity(quantity)

        logger.info(
            "Transaction %s completed: customer_type=%s items=%d amount_due=%s",
            sale.transaction_number,
            customer_type,
            len(lines),
            sale.amount_due,
        )
        return sale


class TransactionItemSerializer(serializers.ModelSerializer):
    """Serializer for transaction line items."""

    product_sku = serializers.CharField(source="product.sku", read_only=True, default=None)

    class Meta:
        model = TransactionItem
        fields = [
            "id",
            "line_number",
            "product",
            "product_sku",
            "product_name",
            "quantity",
            "unit_price",
            "total_price",
            "vat_exempt",
            "discount_applied",
            "vat_amount",
            "discount_amount",
            "final_price",
        ]


class TransactionDetailSerializer(serializers.ModelSerializer):
    """Serializer for transaction details."""

    items = TransactionItemSerializer(many=True, read_only=True)
    discount_label = serializers.CharField(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "transaction_number",
            "customer_type",
            "customer_name",
            "cashier_name",
            "items",
            "subtotal",
            "total_vat_exempt",
            "total_discount",
            "discount_label",
            "amount_due",
            "vatable_sales",
            "vat_exempt_sales",
            "vat_amount",
            "vat_rate",
            "discount_rate",
            "payment_method",
            "cash_received",
            "change_due",
            "status",
            "notes",
            "created_at",
        ]


class TransactionListSerializer(serializers.ModelSerializer):
    """Serializer for transaction list."""

    customer_name = serializers.SerializerMethodField()
    items_count = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            "id",
            "transaction_number",
            "customer_type",
            "customer_name",
            "cashier_name",
            "amount_due",
            "payment_method",
            "status",
            "items_count",
            "created_at",
        ]

    def get_customer_name(self, obj):
        """Get customer name or 'Walk-in' if none was recorded."""
        return obj.customer_name or "Walk-in"

    def get_items_count(self, obj):
        return obj.item_count


class TransactionStatusChangeSerializer(serializers.Serializer):
    """Reason recorded with a refund or void."""

    reason = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
