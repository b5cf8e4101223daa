from rest_framework.viewsets import ViewSetMixin


class OptimizedQuerysetMixin(ViewSetMixin):
    """
    A ViewSet mixin that applies the `select_related_fields` and
    `prefetch_related_fields` declared on the serializer's Meta.
    """

    def get_queryset(self):
        queryset = super().get_queryset()

        serializer_class = self.get_serializer_class()
        meta = getattr(serializer_class, "Meta", None)
        select_related = getattr(meta, "select_related_fields", [])
        prefetch_related = getattr(meta, "prefetch_related_fields", [])

        if select_related:
            queryset = queryset.select_related(*select_related)
        if prefetch_related:
            queryset = queryset.prefetch_related(*prefetch_related)
        return queryset


class VenueScopedQuerysetMixin:
    """
    Automatically filters queryset by request.venue.

    Usage:
        class OrderViewSet(VenueScopedQuerysetMixin, BaseViewSet):
            # Queryset is automatically venue-filtered

    The VenueManager already filters by the thread-local venue; this keeps
    the filter explicit at the view layer as well.
    """

    def get_queryset(self):
        qs = super().get_queryset()

        # Only filter if model has venue field
        if not hasattr(qs.model, 'venue'):
            return qs

        venue = getattr(self.request, 'venue', None)
        if venue is None:
            # FAIL LOUD: No venue context when model requires it
            raise ValueError(
                f"{self.__class__.__name__} requires venue context. "
                f"This likely indicates a middleware issue."
            )

        return qs.filter(venue=venue)
