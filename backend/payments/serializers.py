from rest_framework import serializers

from core_backend.base import BaseModelSerializer, MoneyField

from .models import Payment


class PaymentSerializer(BaseModelSerializer):
    order_number = serializers.IntegerField(source="order.order_number", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "venue",
            "order",
            "order_number",
            "amount",
            "tip_amount",
            "payment_method",
            "status",
            "processed_by",
            "card_last_four",
            "card_brand",
            "processor",
            "processor_transaction_id",
            "processor_fee",
            "comp_reason",
            "comp_by",
            "is_refunded",
            "refund_amount",
            "refund_reason",
            "refunded_at",
            "refunded_by",
            "processed_at",
            "created_at",
        ]
        read_only_fields = fields
        select_related_fields = ["order"]


class ProcessPaymentSerializer(serializers.Serializer):
    """
    Request shape for taking a payment. Amount, tip and comp rules are
    enforced by PaymentService.
    """

    order_id = serializers.UUIDField()
    amount = MoneyField()
    tip_amount = MoneyField(required=False, default=0)
    payment_method = serializers.ChoiceField(choices=Payment.PaymentMethod.choices)

    card_last_four = serializers.CharField(max_length=4, required=False, allow_blank=True)
    card_brand = serializers.CharField(max_length=20, required=False, allow_blank=True)
    processor = serializers.CharField(max_length=50, required=False, allow_blank=True)
    processor_transaction_id = serializers.CharField(max_length=255, required=False, allow_blank=True)
    processor_fee = MoneyField(required=False, allow_null=True)

    comp_reason = serializers.CharField(required=False, allow_blank=True, default="")
    comp_by = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")


class RefundPaymentSerializer(serializers.Serializer):
    refund_amount = MoneyField()
    refund_reason = serializers.CharField(required=False, allow_blank=True, default="")


class PaymentSummarySerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    order_total = MoneyField()
    total_paid = MoneyField()
    balance_due = MoneyField()
    is_fully_paid = serializers.BooleanField()
    payment_count = serializers.IntegerField()
