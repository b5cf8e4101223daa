"""
Orders services package - modular service layer for order management.

- OrderService: Core order lifecycle (create, send, complete, void, cancel, queries)
- OrderCalculationService: Totals recompute
- OrderItemService: Item management (add, update, remove)
- OrderDiscountService: Discount application
"""

# Core order operations
from .order_service import OrderService

# Calculation operations
from .calculation_service import OrderCalculationService

# Item management
from .item_service import OrderItemService

# Discount operations
from .discount_service import OrderDiscountService

__all__ = [
    'OrderService',
    'OrderCalculationService',
    'OrderItemService',
    'OrderDiscountService',
]
