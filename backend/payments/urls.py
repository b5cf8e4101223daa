from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import PaymentViewSet

app_name = "payments"

router = SimpleRouter()
router.register(r"", PaymentViewSet, basename="payment")

urlpatterns = [
    # /api/payments/, /api/payments/{id}/, /api/payments/{id}/refund/
    path("", include(router.urls)),
]
