"""
Pytest configuration and fixtures for the grocery POS.
"""

from decimal import Decimal

import pytest

from apps.inventory.models import Product
from apps.pricing.discounts import CustomerType, LineItem


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def milk(db):
    """Fresh milk: eligible for both VAT exemption and the discount."""
    return Product.objects.create(
        sku="DAIRY-001",
        barcode="4800000000011",
        name="Milk",
        category="Dairy",
        price=Decimal("100.00"),
        stock=50,
    )


@pytest.fixture
def cigarettes(db):
    """Tobacco: excluded from Senior Citizen / PWD relief."""
    return Product.objects.create(
        sku="TOB-001",
        barcode="4800000000028",
        name="Cigarettes",
        category="Tobacco",
        price=Decimal("150.00"),
        stock=20,
        is_discountable=False,
        is_vat_exemptable=False,
    )


@pytest.fixture
def vitamins(db):
    """Discountable but not VAT-exemptable."""
    return Product.objects.create(
        sku="HLTH-001",
        name="Vitamins",
        category="Health",
        price=Decimal("100.00"),
        stock=10,
        is_vat_exemptable=False,
    )


@pytest.fixture
def sample_cart():
    """Two milks and a pack of cigarettes, as engine line items."""
    return [
        LineItem(
            product_id="milk",
            name="Milk",
            unit_price=Decimal("100.00"),
            quantity=2,
            is_discountable=True,
            is_vat_exemptable=True,
        ),
        LineItem(
            product_id="cigarettes",
            name="Cigarettes",
            unit_price=Decimal("150.00"),
            quantity=1,
            is_discountable=False,
            is_vat_exemptable=False,
        ),
    ]


@pytest.fixture
def checkout_payload(milk, cigarettes):
    """Request body for a senior citizen checkout of the sample cart."""
    return {
        "customer_type": CustomerType.SENIOR,
        "customer_name": "Lola Remedios",
        "cashier_name": "Maria",
        "payment_method": "cash",
        "cash_received": "500.00",
        "items": [
            {"product_id": str(milk.id), "quantity": 2},
            {"product_id": str(cigarettes.id), "quantity": 1},
        ],
    }


@pytest.fixture
def senior_transaction(milk, cigarettes):
    """A completed senior citizen transaction created through the serializer."""
    from apps.sales.serializers import TransactionCreateSerializer

    serializer = TransactionCreateSerializer(
        data={
            "customer_type": CustomerType.SENIOR,
            "customer_name": "Lola Remedios",
            "cashier_name": "Maria",
            "payment_method": "cash",
            "cash_received": "500.00",
            "items": [
                {"product_id": str(milk.id), "quantity": 2},
                {"product_id": str(cigarettes.id), "quantity": 1},
            ],
        }
    )
    assert serializer.is_valid(), serializer.errors
    return serializer.save()
