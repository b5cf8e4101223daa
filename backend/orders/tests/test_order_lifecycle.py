"""
Order Lifecycle Tests

Status machine: open -> sent -> completed, with void and cancel allowed
from open or sent. completed, voided and cancelled are terminal.
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import InvalidOperation
from venues.managers import set_current_venue
from orders import lifecycle
from orders.models import Order, OrderItem
from orders.services import OrderItemService, OrderService

S = Order.OrderStatus


class TestTransitionTable:
    """Unit checks of the transition table itself"""

    @pytest.mark.parametrize('current,target', [
        (S.OPEN, S.SENT),
        (S.OPEN, S.COMPLETED),
        (S.OPEN, S.VOIDED),
        (S.OPEN, S.CANCELLED),
        (S.SENT, S.COMPLETED),
        (S.SENT, S.VOIDED),
        (S.SENT, S.CANCELLED),
    ])
    def test_allowed(self, current, target):
        assert lifecycle.can_transition(current, target)

    @pytest.mark.parametrize('current,target', [
        (S.SENT, S.OPEN),
        (S.SENT, S.SENT),
        (S.COMPLETED, S.VOIDED),
        (S.COMPLETED, S.OPEN),
        (S.VOIDED, S.OPEN),
        (S.CANCELLED, S.COMPLETED),
    ])
    def test_rejected(self, current, target):
        assert not lifecycle.can_transition(current, target)

    def test_terminal_statuses(self):
        assert lifecycle.TERMINAL_STATUSES == {S.COMPLETED, S.VOIDED, S.CANCELLED}
        assert not lifecycle.is_terminal(S.SENT)


@pytest.mark.django_db
class TestSendToKitchen:

    def test_send_stamps_items(self, order_with_items_venue_a):
        """
        Sending marks every line sent with one shared timestamp
        """
        order = OrderService.send_to_kitchen(order_with_items_venue_a.id)

        assert order.status == S.SENT
        assert order.sent_at is not None

        items = list(OrderItem.objects.filter(order=order))
        assert {item.status for item in items} == {OrderItem.ItemStatus.SENT}
        assert {item.sent_to_kitchen_at for item in items} == {order.sent_at}

    def test_send_empty_order_rejected(self, order_venue_a):
        with pytest.raises(InvalidOperation, match='Cannot send empty order') as exc_info:
            OrderService.send_to_kitchen(order_venue_a.id)
        assert exc_info.value.code == 'empty_order'

    def test_send_twice_rejected(self, order_with_items_venue_a):
        OrderService.send_to_kitchen(order_with_items_venue_a.id)

        with pytest.raises(InvalidOperation):
            OrderService.send_to_kitchen(order_with_items_venue_a.id)


@pytest.mark.django_db
class TestCompleteOrder:

    def test_complete_from_open(self, order_with_items_venue_a):
        order = OrderService.complete_order(order_with_items_venue_a.id)

        assert order.status == S.COMPLETED
        assert order.completed_at is not None

    def test_complete_from_sent(self, order_with_items_venue_a):
        OrderService.send_to_kitchen(order_with_items_venue_a.id)
        order = OrderService.complete_order(order_with_items_venue_a.id)
        assert order.status == S.COMPLETED

    def test_complete_twice_rejected(self, order_with_items_venue_a):
        """
        CRITICAL: A completed check cannot be closed again
        """
        OrderService.complete_order(order_with_items_venue_a.id)

        with pytest.raises(InvalidOperation, match='Cannot complete order twice') as exc_info:
            OrderService.complete_order(order_with_items_venue_a.id)
        assert exc_info.value.code == 'already_completed'

    def test_complete_empty_order_rejected(self, order_venue_a):
        with pytest.raises(InvalidOperation, match='Cannot complete empty order'):
            OrderService.complete_order(order_venue_a.id)

        order_venue_a.refresh_from_db()
        assert order_venue_a.status == S.OPEN
        assert order_venue_a.completed_at is None

    def test_complete_cancelled_rejected(self, order_with_items_venue_a):
        OrderService.cancel_order(order_with_items_venue_a.id)

        with pytest.raises(InvalidOperation):
            OrderService.complete_order(order_with_items_venue_a.id)


@pytest.mark.django_db
class TestVoidAndCancel:

    def test_void_open_order(self, order_with_items_venue_a):
        order = OrderService.void_order(order_with_items_venue_a.id)
        assert order.status == S.VOIDED

    def test_void_sent_order(self, order_with_items_venue_a):
        OrderService.send_to_kitchen(order_with_items_venue_a.id)
        order = OrderService.void_order(order_with_items_venue_a.id)
        assert order.status == S.VOIDED

    def test_void_empty_order_allowed(self, order_venue_a):
        order = OrderService.void_order(order_venue_a.id)
        assert order.status == S.VOIDED

    def test_void_completed_rejected(self, order_with_items_venue_a):
        """
        CRITICAL: Completed sales cannot be voided

        Business Impact: Voiding a settled check hides revenue
        """
        OrderService.complete_order(order_with_items_venue_a.id)

        with pytest.raises(InvalidOperation, match='Cannot void completed order'):
            OrderService.void_order(order_with_items_venue_a.id)

    def test_void_twice_rejected(self, order_venue_a):
        OrderService.void_order(order_venue_a.id)
        with pytest.raises(InvalidOperation):
            OrderService.void_order(order_venue_a.id)

    def test_cancel_sent_order(self, order_with_items_venue_a):
        OrderService.send_to_kitchen(order_with_items_venue_a.id)
        order = OrderService.cancel_order(order_with_items_venue_a.id)
        assert order.status == S.CANCELLED

    def test_totals_survive_void(self, order_with_items_venue_a):
        order = OrderService.void_order(order_with_items_venue_a.id)
        assert order.total == Decimal('30.31')


@pytest.mark.django_db
class TestItemMutationGate:
    """Line items change only while the order is open"""

    @pytest.mark.parametrize('close', [
        OrderService.send_to_kitchen,
        OrderService.complete_order,
        OrderService.void_order,
        OrderService.cancel_order,
    ])
    def test_add_item_rejected_after_open(self, order_with_items_venue_a, close):
        close(order_with_items_venue_a.id)

        with pytest.raises(InvalidOperation, match='Cannot modify items on a closed order') as exc_info:
            OrderItemService.add_item(order_with_items_venue_a.id, name='Pie', price=Decimal('5.00'))
        assert exc_info.value.code == 'order_closed'

    def test_update_and_remove_rejected_after_send(self, order_with_items_venue_a):
        set_current_venue(order_with_items_venue_a.venue)
        fries = order_with_items_venue_a.items.get(name='Fries')
        OrderService.send_to_kitchen(order_with_items_venue_a.id)

        with pytest.raises(InvalidOperation):
            OrderItemService.update_item(fries.id, quantity=3)
        with pytest.raises(InvalidOperation):
            OrderItemService.remove_item(fries.id)

        order_with_items_venue_a.refresh_from_db()
        assert order_with_items_venue_a.total == Decimal('30.31')
