from rest_framework import serializers

from core_backend.base import BaseModelSerializer
from orders.models import Order

from .order_item_serializers import OrderItemSerializer


class OrderListSerializer(BaseModelSerializer):
    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "business_date",
            "server_id",
            "table_number",
            "guest_count",
            "order_type",
            "status",
            "subtotal",
            "tax",
            "tip",
            "discount",
            "total",
            "created_at",
            "completed_at",
        ]
        read_only_fields = fields


class OrderSerializer(BaseModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "venue",
            "order_number",
            "business_date",
            "server_id",
            "table_number",
            "guest_count",
            "order_type",
            "status",
            "subtotal",
            "tax",
            "tip",
            "discount",
            "total",
            "notes",
            "created_at",
            "updated_at",
            "sent_at",
            "completed_at",
            "items",
        ]
        read_only_fields = fields
        select_related_fields = ["venue"]
        prefetch_related_fields = ["items__modifiers"]


class OrderCreateSerializer(serializers.Serializer):
    """
    Input for opening a tab. server_id defaults to the staff id from the
    identity context.
    """

    server_id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    table_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    guest_count = serializers.IntegerField(required=False, default=1)
    order_type = serializers.ChoiceField(
        choices=Order.OrderType.choices, required=False, default=Order.OrderType.DINE_IN
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
