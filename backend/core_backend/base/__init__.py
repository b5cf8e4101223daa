"""
Core backend base components.

Foundational classes shared by the engine's REST layer.
"""

from .viewsets import BaseViewSet
from .serializers import BaseModelSerializer, MoneyField
from .mixins import OptimizedQuerysetMixin, VenueScopedQuerysetMixin

__all__ = [
    # ViewSets
    'BaseViewSet',

    # Serializers
    'BaseModelSerializer',
    'MoneyField',

    # Mixins
    'OptimizedQuerysetMixin',
    'VenueScopedQuerysetMixin',
]
