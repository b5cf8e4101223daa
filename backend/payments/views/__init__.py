"""
Payments views package.
"""

from .payment_viewset import PaymentViewSet

__all__ = [
    'PaymentViewSet',
]
