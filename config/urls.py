"""
URL configuration for the grocery POS.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health/", include("apps.core.health")),
    path("", include("apps.sales.urls")),
    path("", include("django_prometheus.urls")),  # Prometheus metrics endpoint at /metrics
]
