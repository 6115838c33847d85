"""
Admin configuration for catalog models.
"""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product."""

    list_display = [
        "sku",
        "name",
        "category",
        "price",
        "stock",
        "is_discountable",
        "is_vat_exemptable",
        "status",
    ]
    list_filter = [
        "status",
        "is_discountable",
        "is_vat_exemptable",
        "category",
    ]
    search_fields = [
        "sku",
        "name",
        "barcode",
    ]
    readonly_fields = ["created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("sku", "barcode", "name", "category", "status"),
            },
        ),
        (
            "Pricing",
            {
                "fields": ("price",),
            },
        ),
        (
            "Senior Citizen / PWD Eligibility",
            {
                "fields": ("is_discountable", "is_vat_exemptable"),
            },
        ),
        (
            "Inventory Tracking",
            {
                "fields": ("stock", "min_stock"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
