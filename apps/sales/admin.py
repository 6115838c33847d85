"""
Django admin configuration for sales models.
"""

from django.contrib import admin

from .models import Transaction, TransactionItem


class TransactionItemInline(admin.TabularInline):
    """Inline admin for TransactionItem model."""

    model = TransactionItem
    extra = 0
    can_delete = False
    readonly_fields = [
        "line_number",
        "product",
        "product_name",
        "quantity",
        "unit_price",
        "total_price",
        "vat_exempt",
        "vat_amount",
        "discount_applied",
        "discount_amount",
        "final_price",
    ]
    fields = readonly_fields


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin interface for Transaction model."""

    list_display = [
        "transaction_number",
        "customer_type",
        "customer_name",
        "cashier_name",
        "amount_due",
        "payment_method",
        "status",
        "created_at",
    ]
    list_filter = ["status", "customer_type", "payment_method", "created_at"]
    search_fields = [
        "transaction_number",
        "customer_name",
        "cashier_name",
    ]
    readonly_fields = [
        "id",
        "transaction_number",
        "subtotal",
        "total_vat_exempt",
        "total_discount",
        "amount_due",
        "vatable_sales",
        "vat_exempt_sales",
        "vat_amount",
        "vat_rate",
        "discount_rate",
        "created_at",
        "updated_at",
    ]
    inlines = [TransactionItemInline]
    fieldsets = [
        (
            "Basic Information",
            {
                "fields": ["id", "transaction_number", "status", "cashier_name"],
            },
        ),
        (
            "Customer",
            {
                "fields": ["customer_type", "customer_name"],
            },
        ),
        (
            "Senior Citizen / PWD Breakdown",
            {
                "fields": [
                    "subtotal",
                    "total_vat_exempt",
                    "total_discount",
                    "discount_rate",
                    "amount_due",
                ],
            },
        ),
        (
            "VAT Summary",
            {
                "fields": ["vatable_sales", "vat_exempt_sales", "vat_amount", "vat_rate"],
            },
        ),
        (
            "Payment",
            {
                "fields": ["payment_method", "cash_received", "change_due"],
            },
        ),
        (
            "Additional Information",
            {
                "fields": ["notes"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at"],
            },
        ),
    ]
