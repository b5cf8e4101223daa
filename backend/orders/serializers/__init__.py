"""
Orders serializers package - modular serializer layer.
"""

# Order item serializers
from .order_item_serializers import (
    OrderItemModifierSerializer,
    OrderItemSerializer,
    ModifierSelectionSerializer,
    AddOrderItemSerializer,
    UpdateOrderItemSerializer,
)

# Order serializers
from .order_serializers import (
    OrderListSerializer,
    OrderSerializer,
    OrderCreateSerializer,
)

# Discount serializers
from .discount_serializers import ApplyDiscountSerializer

__all__ = [
    # Order items
    'OrderItemModifierSerializer',
    'OrderItemSerializer',
    'ModifierSelectionSerializer',
    'AddOrderItemSerializer',
    'UpdateOrderItemSerializer',
    # Orders
    'OrderListSerializer',
    'OrderSerializer',
    'OrderCreateSerializer',
    # Discounts
    'ApplyDiscountSerializer',
]
