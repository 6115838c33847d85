"""
Views for checkout and transaction management.

- Live cart totals with Senior Citizen / PWD pricing
- Checkout (transaction creation with stock deduction)
- Transaction list, detail, refund and void
- PDF and plain-text receipts
"""

import logging
from decimal import Decimal

from django.db.models import Prefetch, Q
from django.http import Http404, HttpResponse
from django.views.decorators.http import require_http_methods

from rest_framework import filters, generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.pricing.services import CheckoutPricingService

from .models import Transaction, TransactionItem
from .receipt_service import FORMAT_TYPES, ReceiptService
from .serializers import (
    CalculateTotalsSerializer,
    TransactionCreateSerializer,
    TransactionDetailSerializer,
    TransactionListSerializer,
    TransactionStatusChangeSerializer,
    load_cart_products,
)

logger = logging.getLogger(__name__)


def _transaction_queryset():
    return Transaction.objects.prefetch_related(
        Prefetch("items", queryset=TransactionItem.objects.select_related("product"))
    )


def _stringify_decimals(value):
    """Render Decimals as strings, the way DecimalField output does."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {key: _stringify_decimals(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_stringify_decimals(item) for item in value]
    return value


# POS API Endpoints


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def pos_calculate_totals(request):
    """
    Calculate cart totals without creating a transaction.

    Lets the terminal show the Senior Citizen / PWD breakdown live while
    the cashier builds the cart.

    Request body:
    {
        "customer_type": "regular|senior|pwd" (optional, default: regular),
        "items": [
            {
                "product_id": "uuid",
                "quantity": 1,
                "unit_price": "100.00" (optional, uses current price if not provided)
            }
        ]
    }

    Response:
    {
        "customer_type": "senior",
        "subtotal": "350.00",
        "total_vat_exempt": "21.43",
        "total_discount_amount": "35.71",
        "amount_due": "292.86",
        "discount_label": "Senior Citizen Discount (20%)",
        "vat_summary": {...},
        "items": [...]
    }
    """
    serializer = CalculateTotalsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        lines = load_cart_products(data["items"])
        pricing = CheckoutPricingService()
        result = pricing.calculate_for_products(lines, data["customer_type"])
        summary = pricing.vat_summary(result)
    except ValueError as e:
        return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

    response_data = result.to_dict()
    response_data["discount_rate"] = pricing.discount_rate_percent
    response_data["vat_summary"] = {
        "vatable_sales": summary.vatable_sales,
        "vat_exempt_sales": summary.vat_exempt_sales,
        "vat_amount": summary.vat_amount,
        "vat_rate": summary.vat_rate,
    }
    return Response(_stringify_decimals(response_data), status=status.HTTP_200_OK)


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def pos_create_transaction(request):
    """
    Complete a checkout.

    Request body:
    {
        "customer_type": "regular|senior|pwd",
        "customer_name": "" (optional),
        "cashier_name": "Maria",
        "items": [{"product_id": "uuid", "quantity": 2}],
        "payment_method": "cash|card|digital",
        "cash_received": "500.00" (required for cash),
        "notes": "" (optional)
    }

    Prices the cart, checks stock, deducts it under row locks and records
    the transaction with its line breakdown. Everything runs in one
    database transaction.
    """
    serializer = TransactionCreateSerializer(data=request.data)

    if serializer.is_valid():
        try:
            sale = serializer.save()
            return Response(
                TransactionDetailSerializer(sale).data,
                status=status.HTTP_201_CREATED,
            )
        except ValueError as e:
            logger.warning(f"POS checkout rejected: {str(e)}")
            return Response(
                {"detail": str(e)},
                status=status.HTTP_400_BAD_REQUEST,
            )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _change_status(request, transaction_id, action):
    try:
        sale = Transaction.objects.get(id=transaction_id)
    except Transaction.DoesNotExist:
        return Response(
            {"detail": "Transaction not found."},
            status=status.HTTP_404_NOT_FOUND,
        )

    serializer = TransactionStatusChangeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    reason = serializer.validated_data["reason"]
    try:
        if action == "refund":
            sale.mark_as_refunded(reason)
        else:
            sale.mark_as_voided(reason)
    except ValueError as e:
        return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

    logger.info(
        "Transaction %s %s: amount_due=%s reason=%r",
        sale.transaction_number,
        sale.status,
        sale.amount_due,
        reason,
    )
    return Response(
        TransactionDetailSerializer(_transaction_queryset().get(id=sale.id)).data,
        status=status.HTTP_200_OK,
    )


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def transaction_refund(request, transaction_id):
    """Refund a completed transaction and return its items to stock."""
    return _change_status(request, transaction_id, "refund")


@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def transaction_void(request, transaction_id):
    """Void a completed transaction and return its items to stock."""
    return _change_status(request, transaction_id, "void")


# Transaction Management Views


class TransactionListView(generics.ListAPIView):
    """
    API endpoint for listing transactions with filters.

    Query parameters:
    - search: Search by transaction number, customer or cashier name
    - status: Filter by status
    - customer_type: Filter by customer type
    - payment_method: Filter by payment method
    - date_from: Filter by date (YYYY-MM-DD)
    - date_to: Filter by date (YYYY-MM-DD)
    """

    serializer_class = TransactionListSerializer
    permission_classes = [permissions.AllowAny]
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["created_at", "amount_due", "transaction_number"]
    ordering = ["-created_at"]

    def get_queryset(self):
        queryset = Transaction.objects.prefetch_related("items")

        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(
                Q(transaction_number__icontains=search)
                | Q(customer_name__icontains=search)
                | Q(cashier_name__icontains=search)
            )

        txn_status = self.request.query_params.get("status")
        if txn_status:
            queryset = queryset.filter(status=txn_status)

        customer_type = self.request.query_params.get("customer_type")
        if customer_type:
            queryset = queryset.filter(customer_type=customer_type)

        payment_method = self.request.query_params.get("payment_method")
        if payment_method:
            queryset = queryset.filter(payment_method=payment_method)

        date_from = self.request.query_params.get("date_from")
        if date_from:
            queryset = queryset.filter(created_at__date__gte=date_from)

        date_to = self.request.query_params.get("date_to")
        if date_to:
            queryset = queryset.filter(created_at__date__lte=date_to)

        return queryset


class TransactionDetailView(generics.RetrieveAPIView):
    """API endpoint for retrieving a single transaction."""

    serializer_class = TransactionDetailSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "id"

    def get_queryset(self):
        return _transaction_queryset()


# Receipt Generation Views


def _get_receipt_transaction(transaction_id):
    try:
        return _transaction_queryset().get(id=transaction_id)
    except Transaction.DoesNotExist:
        raise Http404("Receipt not found")


@require_http_methods(["GET"])
def receipt_pdf(request, transaction_id, format_type="standard"):
    """
    Generate PDF receipt for download.

    Args:
        transaction_id: UUID of the transaction
        format_type: 'standard' or 'thermal'
    """
    if format_type not in FORMAT_TYPES:
        raise Http404("Unknown receipt format")

    sale = _get_receipt_transaction(transaction_id)
    pdf_bytes = ReceiptService.generate_receipt(
        sale=sale, format_type=format_type, output_format="pdf"
    )

    response = HttpResponse(pdf_bytes, content_type="application/pdf")
    filename = f"receipt_{sale.transaction_number}_{format_type}.pdf"
    response["Content-Disposition"] = f'attachment; filename="{filename}"'

    return response


@require_http_methods(["GET"])
def receipt_text(request, transaction_id):
    """Plain-text receipt for terminal printers."""
    sale = _get_receipt_transaction(transaction_id)
    text_bytes = ReceiptService.generate_receipt(sale=sale, output_format="text")
    return HttpResponse(text_bytes, content_type="text/plain; charset=utf-8")
