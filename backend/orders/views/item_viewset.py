import logging

from rest_framework import mixins, status
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from core_backend.exceptions import NotFound
from orders.models import OrderItem
from orders.serializers import (
    AddOrderItemSerializer,
    OrderItemSerializer,
    OrderSerializer,
    UpdateOrderItemSerializer,
)
from orders.services import OrderItemService, OrderService

logger = logging.getLogger(__name__)


class OrderItemViewSet(mixins.ListModelMixin, BaseViewSet):
    """
    A ViewSet for managing the items within an order.
    """

    queryset = OrderItem.objects.all()
    serializer_class = OrderItemSerializer
    pagination_class = None
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_serializer_class(self):
        if self.action == "create":
            return AddOrderItemSerializer
        if self.action == "partial_update":
            return UpdateOrderItemSerializer
        return OrderItemSerializer

    def get_queryset(self):
        """
        Filter items based on the order_pk provided in the URL.
        """
        return OrderService.get_order_items(self.kwargs["order_pk"])

    def _get_order_item(self, pk):
        # The item must belong to the order in the URL
        item = OrderItemService.get_item(pk)
        if str(item.order_id) != str(self.kwargs["order_pk"]):
            raise NotFound("Order item", pk)
        return item

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = AddOrderItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order_pk = self.kwargs["order_pk"]

        if serializer.uses_catalog:
            item = OrderItemService.add_menu_item(
                order_pk,
                menu_item_id=data["menu_item_id"],
                quantity=data.get("quantity", 1),
                modifiers=data.get("modifiers", []),
                notes=data.get("notes", ""),
            )
        else:
            item = OrderItemService.add_item(
                order_pk,
                name=data["name"],
                price=data["price"],
                quantity=data.get("quantity", 1),
                menu_item_id=data.get("menu_item_id"),
                modifiers=data.get("modifiers", []),
                notes=data.get("notes", ""),
            )

        item = OrderItem.objects.prefetch_related("modifiers").get(id=item.id)
        return Response(OrderItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, *args, **kwargs) -> Response:
        self._get_order_item(kwargs["pk"])
        serializer = UpdateOrderItemSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        item = OrderItemService.update_item(kwargs["pk"], **serializer.validated_data)
        item = OrderItem.objects.prefetch_related("modifiers").get(id=item.id)
        return Response(OrderItemSerializer(item).data)

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        self._get_order_item(kwargs["pk"])
        order = OrderItemService.remove_item(kwargs["pk"])
        order = OrderService.get_order(order.id)
        return Response(OrderSerializer(order).data)
