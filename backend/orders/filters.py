import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Filters for the order list: ?status=open&order_type=bar&server_id=...
    """

    status = django_filters.ChoiceFilter(choices=Order.OrderStatus.choices)
    order_type = django_filters.ChoiceFilter(choices=Order.OrderType.choices)
    server_id = django_filters.CharFilter()
    table_number = django_filters.CharFilter()
    business_date = django_filters.DateFilter()

    created_at__gte = django_filters.DateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_at__lte = django_filters.DateTimeFilter(field_name='created_at', lookup_expr='lte')
    completed_at__gte = django_filters.DateTimeFilter(field_name='completed_at', lookup_expr='gte')
    completed_at__lte = django_filters.DateTimeFilter(field_name='completed_at', lookup_expr='lte')

    class Meta:
        model = Order
        fields = ['status', 'order_type', 'server_id', 'table_number', 'business_date']
