import logging

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import ApplyDiscountSerializer, OrderSerializer
from orders.services import OrderDiscountService, OrderService

logger = logging.getLogger(__name__)


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet. Business rules are
    enforced by the services; engine errors are rendered by the project's
    exception handler.
    """

    def _order_response(self, order):
        order = OrderService.get_order(order.id)
        return Response(OrderSerializer(order, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"], url_path="send")
    def send(self, request: Request, pk=None) -> Response:
        """Fire the order to the kitchen."""
        return self._order_response(OrderService.send_to_kitchen(pk))

    @action(detail=True, methods=["post"], url_path="complete")
    def complete(self, request: Request, pk=None) -> Response:
        return self._order_response(OrderService.complete_order(pk))

    @action(detail=True, methods=["post"], url_path="void")
    def void(self, request: Request, pk=None) -> Response:
        return self._order_response(OrderService.void_order(pk))

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request: Request, pk=None) -> Response:
        return self._order_response(OrderService.cancel_order(pk))

    @action(detail=True, methods=["post"], url_path="discount")
    def discount(self, request: Request, pk=None) -> Response:
        serializer = ApplyDiscountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderDiscountService.apply_discount(pk, serializer.validated_data["amount"])
        return self._order_response(order)
