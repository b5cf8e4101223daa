from rest_framework import viewsets
from django_filters.rest_framework import DjangoFilterBackend

from .mixins import OptimizedQuerysetMixin, VenueScopedQuerysetMixin
from ..pagination import StandardPagination


class BaseViewSet(VenueScopedQuerysetMixin, OptimizedQuerysetMixin, viewsets.GenericViewSet):
    """
    Base ViewSet that provides standard configuration for engine endpoints.

    Writes go through the service layer, so only list/retrieve come from
    DRF mixins; subclasses implement create and actions by calling services.

    Usage:
        class OrderViewSet(mixins.ListModelMixin, BaseViewSet):
            serializer_class = OrderSerializer
            queryset = Order.objects.all()
    """

    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend]

    def get_queryset(self):
        """
        IMPORTANT: Re-evaluates queryset at request time to ensure venue context is applied.
        The class-level queryset attribute is evaluated at import time (before venue context exists),
        so we must call Model.objects again here to get a fresh venue-scoped queryset.
        """
        if getattr(self, 'queryset', None) is not None:
            model = self.queryset.model
            original_queryset = self.queryset
            self.queryset = model.objects.all()
            try:
                return super().get_queryset()
            finally:
                # Restore original to avoid side effects on other requests
                self.queryset = original_queryset
        return super().get_queryset()

