"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    # POS API Endpoints
    path("api/pos/calculate-totals/", views.pos_calculate_totals, name="pos_calculate_totals"),
    path("api/pos/transactions/", views.pos_create_transaction, name="pos_create_transaction"),
    # Transaction Management API
    path("api/transactions/", views.TransactionListView.as_view(), name="transaction_list"),
    path(
        "api/transactions/<uuid:id>/",
        views.TransactionDetailView.as_view(),
        name="transaction_detail",
    ),
    path(
        "api/transactions/<uuid:transaction_id>/refund/",
        views.transaction_refund,
        name="transaction_refund",
    ),
    path(
        "api/transactions/<uuid:transaction_id>/void/",
        views.transaction_void,
        name="transaction_void",
    ),
    # Receipt Generation
    path(
        "receipts/pdf/<uuid:transaction_id>/", views.receipt_pdf, name="receipt_pdf_standard"
    ),
    path(
        "receipts/pdf/<uuid:transaction_id>/<str:format_type>/",
        views.receipt_pdf,
        name="receipt_pdf",
    ),
    path("receipts/text/<uuid:transaction_id>/", views.receipt_text, name="receipt_text"),
]
