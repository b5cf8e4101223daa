"""
Order status state machine.

    open -> sent -> completed
      |       |---> voided
      |       `---> cancelled
      |---> completed / voided / cancelled

completed, voided and cancelled are terminal. Line items may only be
added, changed or removed while the order is open.
"""
import logging

from core_backend.exceptions import InvalidOperation

from .models import Order

logger = logging.getLogger(__name__)

OrderStatus = Order.OrderStatus

VALID_STATUS_TRANSITIONS = {
    OrderStatus.OPEN: [
        OrderStatus.SENT,
        OrderStatus.COMPLETED,
        OrderStatus.VOIDED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.SENT: [
        OrderStatus.COMPLETED,
        OrderStatus.VOIDED,
        OrderStatus.CANCELLED,
    ],
    OrderStatus.COMPLETED: [],
    OrderStatus.VOIDED: [],
    OrderStatus.CANCELLED: [],
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in VALID_STATUS_TRANSITIONS.items() if not targets
)


def can_transition(current_status, new_status) -> bool:
    return new_status in VALID_STATUS_TRANSITIONS.get(current_status, [])


def is_terminal(status) -> bool:
    return status in TERMINAL_STATUSES


def ensure_transition(order, new_status, message=None):
    """
    Raise InvalidOperation unless order may move to new_status.
    """
    if not can_transition(order.status, new_status):
        message = message or f"Cannot transition order from {order.status} to {new_status}"
        logger.warning(f"Order {order.id}: {message}")
        raise InvalidOperation(message, code="invalid_transition")


def ensure_items_mutable(order):
    """
    Mutation gate: line items change only while the order is open.
    """
    if order.status != OrderStatus.OPEN:
        message = f"Cannot modify items on a closed order (status: {order.status})"
        logger.warning(f"Order {order.id}: {message}")
        raise InvalidOperation(message, code="order_closed")


def ensure_has_items(order, message):
    if not order.items.exists():
        logger.warning(f"Order {order.id}: {message}")
        raise InvalidOperation(message, code="empty_order")
