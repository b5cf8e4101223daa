import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import InvalidOperation, NotFound, ValidationError
from core_backend.validators import validate_positive_int
from orders import lifecycle
from orders.models import Order, OrderItem

logger = logging.getLogger(__name__)


class OrderService:
    """Core service for order lifecycle management - creating, sending, completing, voiding orders."""

    # Valid status transitions for order state machine
    VALID_STATUS_TRANSITIONS = lifecycle.VALID_STATUS_TRANSITIONS

    @staticmethod
    def get_order(order_id) -> Order:
        """
        Fetch an order in the current venue.

        Raises:
            NotFound: unknown id or an order belonging to another venue
        """
        try:
            return Order.objects.select_related("venue").get(id=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Order", order_id)

    @staticmethod
    def get_order_for_update(order_id) -> Order:
        """
        Fetch and row-lock an order. Must be called inside transaction.atomic.

        Every read-then-write of an order's totals or status goes through
        here, so concurrent terminals editing the same tab are serialized.
        """
        try:
            return Order.objects.select_for_update().select_related("venue").get(id=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound("Order", order_id)

    @staticmethod
    def get_order_items(order_id):
        order = OrderService.get_order(order_id)
        return OrderItem.objects.filter(order=order).prefetch_related("modifiers")

    @staticmethod
    @transaction.atomic
    def create_order(
        venue,
        server_id: str = "",
        table_number: str = "",
        guest_count: int = 1,
        order_type: str = Order.OrderType.DINE_IN,
        notes: str = "",
    ) -> Order:
        """
        Creates a new, empty order in status open.

        The order number is allocated by Order.save() from the venue's
        per-day sequence.

        Args:
            venue: Venue the order belongs to (REQUIRED)
            server_id: Staff member who owns the tab
            table_number: Optional table label
            guest_count: Number of guests (>= 1)
            order_type: dine_in, takeout, delivery or bar
            notes: Free-form notes
        """
        if venue is None:
            raise ValidationError("venue is required for creating orders", field="venue")

        validate_positive_int(guest_count, "guest_count", "Guest count must be at least 1")

        if order_type not in Order.OrderType.values:
            raise ValidationError(f"'{order_type}' is not a valid order type.", field="order_type")

        order = Order.objects.create(
            venue=venue,
            server_id=server_id or "",
            table_number=table_number or "",
            guest_count=guest_count,
            order_type=order_type,
            notes=notes or "",
        )

        logger.info(
            f"Order {order.id} created: #{order.order_number} for venue {venue.id} "
            f"({order.order_type}, server={order.server_id or '-'})"
        )
        return order

    @staticmethod
    @transaction.atomic
    def send_to_kitchen(order_id) -> Order:
        """
        Fire an open order to the kitchen.

        Every current line is stamped status=sent with the same timestamp.
        """
        order = OrderService.get_order_for_update(order_id)

        lifecycle.ensure_transition(
            order, Order.OrderStatus.SENT, f"Cannot send {order.status} order to kitchen"
        )
        lifecycle.ensure_has_items(order, "Cannot send empty order")

        now = timezone.now()
        sent_count = OrderItem.objects.filter(order=order).update(
            status=OrderItem.ItemStatus.SENT, sent_to_kitchen_at=now
        )

        order.status = Order.OrderStatus.SENT
        order.sent_at = now
        order.save(update_fields=["status", "sent_at"])

        logger.info(f"Order {order.id} sent to kitchen with {sent_count} item(s)")
        return order

    @staticmethod
    @transaction.atomic
    def complete_order(order_id) -> Order:
        """
        Close the order. Completing an already-completed order is an error.
        """
        order = OrderService.get_order_for_update(order_id)

        if order.status == Order.OrderStatus.COMPLETED:
            logger.warning(f"Order {order.id}: completion attempted twice")
            raise InvalidOperation("Cannot complete order twice", code="already_completed")

        lifecycle.ensure_transition(
            order, Order.OrderStatus.COMPLETED, f"Cannot complete {order.status} order"
        )
        lifecycle.ensure_has_items(order, "Cannot complete empty order")

        order.status = Order.OrderStatus.COMPLETED
        order.completed_at = timezone.now()
        order.save(update_fields=["status", "completed_at"])

        logger.info(f"Order {order.id} completed (total={order.total})")
        return order

    @staticmethod
    @transaction.atomic
    def void_order(order_id) -> Order:
        order = OrderService.get_order_for_update(order_id)

        if order.status == Order.OrderStatus.COMPLETED:
            logger.warning(f"Order {order.id}: void rejected, order is completed")
            raise InvalidOperation("Cannot void completed order", code="invalid_transition")

        lifecycle.ensure_transition(
            order, Order.OrderStatus.VOIDED, f"Cannot void {order.status} order"
        )

        previous_status = order.status
        order.status = Order.OrderStatus.VOIDED
        order.save(update_fields=["status"])

        logger.info(f"Order {order.id} voided (was {previous_status})")
        return order

    @staticmethod
    @transaction.atomic
    def cancel_order(order_id) -> Order:
        order = OrderService.get_order_for_update(order_id)

        lifecycle.ensure_transition(
            order, Order.OrderStatus.CANCELLED, f"Cannot cancel {order.status} order"
        )

        previous_status = order.status
        order.status = Order.OrderStatus.CANCELLED
        order.save(update_fields=["status"])

        logger.info(f"Order {order.id} cancelled (was {previous_status})")
        return order

    @staticmethod
    def list_orders(venue, status: str = None):
        """
        All orders for the venue, newest first, optionally filtered by status.
        """
        queryset = Order.objects.filter(venue=venue)
        if status:
            if status not in Order.OrderStatus.values:
                raise ValidationError(f"'{status}' is not a valid order status.", field="status")
            queryset = queryset.filter(status=status)
        return queryset.order_by("-created_at", "-order_number")

    @staticmethod
    def list_open_orders(venue):
        return OrderService.list_orders(venue, status=Order.OrderStatus.OPEN)
