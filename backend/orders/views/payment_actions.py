from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from payments.serializers import PaymentSerializer, PaymentSummarySerializer
from payments.services import PaymentService


class PaymentActionsMixin:
    """
    Mixin exposing an order's payment ledger on OrderViewSet.
    """

    @action(detail=True, methods=["get"], url_path="payments")
    def payments(self, request: Request, pk=None) -> Response:
        payments = PaymentService.get_payments_by_order(pk)
        return Response(PaymentSerializer(payments, many=True).data)

    @action(detail=True, methods=["get"], url_path="payment-summary")
    def payment_summary(self, request: Request, pk=None) -> Response:
        summary = PaymentService.get_payment_summary(pk)
        return Response(PaymentSummarySerializer(summary).data)
