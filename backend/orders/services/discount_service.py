from django.db import transaction
import logging

from core_backend.exceptions import InvalidOperation
from core_backend.validators import validate_positive_amount
from orders import lifecycle
from orders.models import Order

logger = logging.getLogger(__name__)


class OrderDiscountService:
    """Service for applying a flat discount to an order."""

    @staticmethod
    @transaction.atomic
    def apply_discount(order_id, amount) -> Order:
        """
        Set the order discount and recompute its total as subtotal + tax - discount.

        Replaces any discount already on the order.

        Raises:
            ValidationError: amount is not positive
            InvalidOperation: order is closed, or amount exceeds the subtotal
        """
        from orders.services.calculation_service import OrderCalculationService
        from orders.services.order_service import OrderService

        order = OrderService.get_order_for_update(order_id)

        if lifecycle.is_terminal(order.status):
            logger.warning(f"Order {order.id}: discount rejected on {order.status} order")
            raise InvalidOperation(f"Cannot apply discount to {order.status} order", code="order_closed")

        amount = validate_positive_amount(
            amount, "amount", "Discount amount must be greater than zero", currency=order.venue.currency
        )
        if amount > order.subtotal:
            logger.warning(
                f"Order {order.id}: discount {amount} rejected, exceeds subtotal {order.subtotal}"
            )
            raise InvalidOperation("Discount cannot exceed subtotal", code="discount_exceeds_subtotal")

        order.discount = amount
        OrderCalculationService.recalculate_order_totals(order)

        logger.info(f"Discount {amount} applied to order {order.id} (total={order.total})")
        return order
