import logging

from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import OrderCreateSerializer, OrderListSerializer, OrderSerializer
from orders.services import OrderService

# Import action mixins
from .payment_actions import PaymentActionsMixin
from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class OrderViewSet(
    StatusActionsMixin,
    PaymentActionsMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    BaseViewSet,
):
    """
    Orders for the venue in the request's identity context.

    list:     GET  /api/orders/?status=open&limit=20&offset=0 (newest first)
    create:   POST /api/orders/
    retrieve: GET  /api/orders/{id}/
    open:     GET  /api/orders/open/
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter

    def get_serializer_class(self):
        if self.action == "create":
            return OrderCreateSerializer
        if self.action in ("list", "open_orders"):
            return OrderListSerializer
        return OrderSerializer

    def get_queryset(self):
        return super().get_queryset().order_by("-created_at", "-order_number")

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = OrderService.create_order(
            venue=request.venue,
            server_id=data.get("server_id") or request.staff_id or "",
            table_number=data.get("table_number", ""),
            guest_count=data.get("guest_count", 1),
            order_type=data.get("order_type", Order.OrderType.DINE_IN),
            notes=data.get("notes", ""),
        )
        order = OrderService.get_order(order.id)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, *args, **kwargs) -> Response:
        order = OrderService.get_order(kwargs["pk"])
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"], url_path="open")
    def open_orders(self, request: Request) -> Response:
        orders = OrderService.list_open_orders(request.venue)
        page = self.paginate_queryset(orders)
        if page is not None:
            return self.get_paginated_response(OrderListSerializer(page, many=True).data)
        return Response(OrderListSerializer(orders, many=True).data)
