"""
URL configuration for core_backend project.

    /api/health/              liveness check (no venue header needed)
    /api/orders/...           orders, items, status actions
    /api/payments/...         payment ledger
"""

from django.http import JsonResponse
from django.urls import path, include


def health_check(request):
    """Simple health check endpoint that doesn't require venue context"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    # The 'orders' app registers its base endpoint as 'orders', so the final path is /api/orders/
    path("api/", include("orders.urls")),
    path("api/payments/", include("payments.urls")),
]
