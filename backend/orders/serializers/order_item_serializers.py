from rest_framework import serializers

from core_backend.base import BaseModelSerializer, MoneyField
from orders.models import OrderItem, OrderItemModifier


class OrderItemModifierSerializer(BaseModelSerializer):
    class Meta:
        model = OrderItemModifier
        fields = ["id", "modifier_id", "name", "price", "quantity"]


class OrderItemSerializer(BaseModelSerializer):
    modifiers = OrderItemModifierSerializer(many=True, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "order",
            "menu_item_id",
            "name",
            "price",
            "quantity",
            "modifier_total",
            "total",
            "notes",
            "status",
            "sent_to_kitchen_at",
            "created_at",
            "modifiers",
        ]
        read_only_fields = fields
        prefetch_related_fields = ["modifiers"]


class ModifierSelectionSerializer(serializers.Serializer):
    """
    A modifier on an incoming line: either a catalog modifier_id, or an
    explicit name and price.
    """

    modifier_id = serializers.UUIDField(required=False, allow_null=True)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    price = MoneyField(required=False)
    quantity = serializers.IntegerField(required=False, default=1)

    def validate(self, data):
        if not data.get("modifier_id") and (not data.get("name") or data.get("price") is None):
            raise serializers.ValidationError("Provide modifier_id, or name and price.")
        return data


class AddOrderItemSerializer(serializers.Serializer):
    """
    Input for adding a line. With menu_item_id the name and price come from
    the catalog; otherwise name and price are required.
    """

    menu_item_id = serializers.UUIDField(required=False, allow_null=True)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    price = MoneyField(required=False)
    quantity = serializers.IntegerField(required=False, default=1)
    modifiers = ModifierSelectionSerializer(many=True, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, data):
        if not data.get("menu_item_id") and (not data.get("name") or data.get("price") is None):
            raise serializers.ValidationError("Provide menu_item_id, or name and price.")
        return data

    @property
    def uses_catalog(self):
        return bool(self.validated_data.get("menu_item_id")) and "price" not in self.validated_data


class UpdateOrderItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=OrderItem.ItemStatus.choices, required=False)
