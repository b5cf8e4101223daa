from rest_framework import serializers

from core_backend.base import MoneyField


class ApplyDiscountSerializer(serializers.Serializer):
    """
    Serializer for applying a flat discount to an order.
    """

    amount = MoneyField()
