import logging

from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.base import BaseViewSet

from ..models import Payment
from ..serializers import PaymentSerializer, ProcessPaymentSerializer, RefundPaymentSerializer
from ..services import PaymentService

logger = logging.getLogger(__name__)

CARD_FIELDS = ("card_last_four", "card_brand", "processor", "processor_transaction_id", "processor_fee")


class PaymentViewSet(mixins.ListModelMixin, BaseViewSet):
    """
    Payments for the venue in the request's identity context.

    list:     GET  /api/payments/ (newest first)
    create:   POST /api/payments/
    retrieve: GET  /api/payments/{id}/
    refund:   POST /api/payments/{id}/refund/
    """

    queryset = Payment.objects.all()
    serializer_class = PaymentSerializer
    filterset_fields = ["payment_method", "status", "is_refunded", "order"]

    def get_queryset(self):
        return super().get_queryset().order_by("-created_at")

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = ProcessPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        card_details = {field: data[field] for field in CARD_FIELDS if field in data}
        payment = PaymentService.process_payment(
            venue=request.venue,
            order_id=data["order_id"],
            amount=data["amount"],
            payment_method=data["payment_method"],
            tip_amount=data.get("tip_amount"),
            processed_by=request.staff_id or "",
            comp_reason=data.get("comp_reason", ""),
            comp_by=data.get("comp_by", ""),
            **card_details,
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, *args, **kwargs) -> Response:
        payment = PaymentService.get_payment(kwargs["pk"])
        return Response(PaymentSerializer(payment).data)

    @action(detail=True, methods=["post"], url_path="refund")
    def refund(self, request: Request, pk=None) -> Response:
        serializer = RefundPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = PaymentService.refund_payment(
            pk,
            refund_amount=serializer.validated_data["refund_amount"],
            refund_reason=serializer.validated_data.get("refund_reason", ""),
            refunded_by=request.staff_id or "",
        )
        return Response(PaymentSerializer(payment).data)
