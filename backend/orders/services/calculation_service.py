import logging

from orders.calculators import OrderCalculator
from orders.models import Order

logger = logging.getLogger(__name__)


class OrderCalculationService:
    """Service for recomputing an order's monetary totals from its line items."""

    @staticmethod
    def recalculate_order_totals(order: Order) -> Order:
        """
        Recompute subtotal, tax and total from the order's current items.

        Invoked synchronously at the end of every item or discount mutation,
        inside the caller's transaction and after the order row is locked.
        The stored discount is preserved, but never left above the subtotal.
        """
        calculator = OrderCalculator(order)
        totals = calculator.calculate_totals()

        if totals["discount"] > totals["subtotal"]:
            logger.info(
                f"Order {order.id}: discount {totals['discount']} clamped to "
                f"subtotal {totals['subtotal']}"
            )
            order.discount = totals["subtotal"]
            totals = calculator.calculate_totals()

        order.subtotal = totals["subtotal"]
        order.tax = totals["tax"]
        order.discount = totals["discount"]
        order.total = totals["total"]
        order.save(update_fields=["subtotal", "tax", "discount", "total"])

        logger.debug(
            f"Order {order.id} totals: subtotal={order.subtotal} tax={order.tax} "
            f"discount={order.discount} total={order.total}"
        )
        return order
