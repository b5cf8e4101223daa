"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like venues, menu items, orders and payments.
"""
import pytest
from decimal import Decimal

from venues.models import Venue
from venues.managers import set_current_venue
from menu.models import MenuItem, Modifier
from orders.models import Order
from orders.services import OrderItemService, OrderService
from payments.models import Payment


# ============================================================================
# VENUE FIXTURES
# ============================================================================

@pytest.fixture
def venue_a(db):
    """Create test venue A (Downtown Grill, 8.25% tax)"""
    return Venue.objects.create(
        name='Downtown Grill',
        slug='downtown-grill',
        tax_rate=Decimal('0.08250'),
        is_active=True
    )


@pytest.fixture
def venue_b(db):
    """Create test venue B (Harbor Bar, 10% tax)"""
    return Venue.objects.create(
        name='Harbor Bar',
        slug='harbor-bar',
        tax_rate=Decimal('0.10000'),
        is_active=True
    )


@pytest.fixture
def inactive_venue(db):
    """Create inactive test venue"""
    return Venue.objects.create(
        name='Closed Bistro',
        slug='closed-bistro',
        is_active=False
    )


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def menu_item_venue_a(venue_a):
    return MenuItem.objects.create(
        venue=venue_a,
        name='Cheeseburger',
        price=Decimal('12.00'),
    )


@pytest.fixture
def menu_item_venue_b(venue_b):
    return MenuItem.objects.create(
        venue=venue_b,
        name='Fish Tacos',
        price=Decimal('14.50'),
    )


@pytest.fixture
def modifier_venue_a(venue_a):
    return Modifier.objects.create(
        venue=venue_a,
        name='Extra Cheese',
        price_adjustment=Decimal('1.50'),
    )


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def order_venue_a(venue_a):
    """Empty open order in venue A"""
    set_current_venue(venue_a)
    return OrderService.create_order(venue=venue_a, server_id='server-1', table_number='12')


@pytest.fixture
def order_venue_b(venue_b):
    """Empty open order in venue B"""
    set_current_venue(venue_b)
    order = OrderService.create_order(venue=venue_b, server_id='server-9', table_number='3')
    set_current_venue(None)
    return order


@pytest.fixture
def order_with_items_venue_a(order_venue_a):
    """
    Open order in venue A:
      2 x Fries @ 6.50                       = 13.00
      1 x Burger @ 12.00 + 2 x Cheese @ 1.50 = 15.00
    subtotal 28.00, tax (8.25%) 2.31, total 30.31
    """
    OrderItemService.add_item(order_venue_a.id, name='Fries', price=Decimal('6.50'), quantity=2)
    OrderItemService.add_item(
        order_venue_a.id,
        name='Burger',
        price=Decimal('12.00'),
        quantity=1,
        modifiers=[{'name': 'Extra Cheese', 'price': Decimal('1.50'), 'quantity': 2}],
    )
    order_venue_a.refresh_from_db()
    return order_venue_a


# ============================================================================
# PAYMENT FIXTURES
# ============================================================================

@pytest.fixture
def cash_payment_venue_a(order_with_items_venue_a):
    from payments.services import PaymentService

    return PaymentService.process_payment(
        venue=order_with_items_venue_a.venue,
        order_id=order_with_items_venue_a.id,
        amount=Decimal('100.00'),
        payment_method=Payment.PaymentMethod.CASH,
        processed_by='server-1',
    )


# ============================================================================
# API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/health/')
            assert response.status_code == 200
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def api_client_factory():
    """
    Factory fixture for API clients carrying the gateway identity headers.

    Usage:
        def test_create_order(api_client_factory, venue_a):
            client = api_client_factory(venue_a, staff_id='server-1')
            response = client.post('/api/orders/', {}, format='json')
    """
    from django.conf import settings
    from rest_framework.test import APIClient

    def _meta_key(header_name):
        return 'HTTP_' + header_name.upper().replace('-', '_')

    def _create_client(venue=None, staff_id=None, use_slug=False):
        client = APIClient()
        headers = {}
        if venue is not None:
            headers[_meta_key(settings.VENUE_HEADER)] = venue.slug if use_slug else str(venue.id)
        if staff_id:
            headers[_meta_key(settings.STAFF_HEADER)] = staff_id
        client.credentials(**headers)
        return client

    return _create_client


@pytest.fixture
def client_venue_a(api_client_factory, venue_a):
    return api_client_factory(venue_a, staff_id='server-1')


@pytest.fixture
def client_venue_b(api_client_factory, venue_b):
    return api_client_factory(venue_b, staff_id='server-9')
