"""
Health check views and URLs for load balancers and deployment verification.
"""

import logging

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import path
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET

from apps.pricing.discounts import InvalidInputError
from apps.pricing.services import CheckoutPricingService

logger = logging.getLogger(__name__)


@never_cache
@require_GET
def health_check(request) -> JsonResponse:
    """
    Basic health check endpoint.

    Returns:
        JsonResponse: {"status": "ok", "version": "...", "environment": "..."}
    """
    return JsonResponse(
        {
            "status": "ok",
            "version": getattr(settings, "VERSION", "1.0.0"),
            "environment": getattr(settings, "ENVIRONMENT", "unknown"),
        }
    )


@never_cache
@require_GET
def health_check_detailed(request) -> JsonResponse:
    """
    Detailed health check with dependency checks.

    Checks:
    - Database connectivity
    - Pricing configuration (VAT and Senior Citizen / PWD rates parse)

    Returns 200 if all checks pass, 503 if any check fails.
    """
    health_status = {
        "status": "healthy",
        "version": getattr(settings, "VERSION", "1.0.0"),
        "environment": getattr(settings, "ENVIRONMENT", "unknown"),
        "checks": {},
    }

    all_healthy = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except DatabaseError as e:
        logger.error(f"Database health check failed: {e}")
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}",
        }
        all_healthy = False

    try:
        pricing = CheckoutPricingService()
        health_status["checks"]["pricing"] = {
            "status": "healthy",
            "vat_rate": str(pricing.vat_rate_percent),
            "discount_rate": str(pricing.discount_rate_percent),
            "statutory": pricing.uses_statutory_rates,
        }
    except InvalidInputError as e:
        logger.error(f"Pricing configuration check failed: {e}")
        health_status["checks"]["pricing"] = {
            "status": "unhealthy",
            "message": str(e),
        }
        all_healthy = False

    if not all_healthy:
        health_status["status"] = "unhealthy"
        status_code = 503
    else:
        status_code = 200

    return JsonResponse(health_status, status=status_code)


@never_cache
@require_GET
def readiness_probe(request) -> JsonResponse:
    """Returns 200 once the database accepts queries, 503 otherwise."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()

        return JsonResponse({"status": "ready"})
    except DatabaseError as e:
        logger.error(f"Readiness probe failed: {e}")
        return JsonResponse({"status": "not_ready", "reason": str(e)}, status=503)


urlpatterns = [
    path("", health_check, name="health"),
    path("detailed/", health_check_detailed, name="health_detailed"),
    path("ready/", readiness_probe, name="readiness"),
]
