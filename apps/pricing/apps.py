"""
Pricing app configuration.
"""

from django.apps import AppConfig


class PricingConfig(AppConfig):
    """Configuration for the pricing app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.pricing"
    verbose_name = "Checkout Pricing"
