"""
Orders API Integration Tests

Tests the complete request/response cycle for order endpoints including:
- Venue middleware integration (X-Venue-ID / X-Staff-ID headers)
- Serializer validation
- Engine error mapping (404 / 409 / 400)
- Pagination and filtering
"""
import uuid

import pytest
from decimal import Decimal
from rest_framework import status

from venues.managers import set_current_venue
from orders.models import Order


def _add_scenario_items(client, order_id):
    client.post(f'/api/orders/{order_id}/items/', {
        'name': 'Fries', 'price': '6.50', 'quantity': 2,
    }, format='json')
    return client.post(f'/api/orders/{order_id}/items/', {
        'name': 'Burger',
        'price': '12.00',
        'quantity': 1,
        'modifiers': [{'name': 'Extra Cheese', 'price': '1.50', 'quantity': 2}],
    }, format='json')


@pytest.mark.django_db
@pytest.mark.integration
class TestOrderEndpoints:

    def test_create_order(self, client_venue_a, venue_a):
        response = client_venue_a.post('/api/orders/', {
            'table_number': '7',
            'guest_count': 3,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED, response.data
        assert response.data['status'] == 'open'
        assert response.data['order_number'] == 1
        assert response.data['venue'] == venue_a.id
        assert response.data['total'] == '0.00'
        assert response.data['items'] == []

    def test_server_defaults_to_staff_header(self, client_venue_a):
        response = client_venue_a.post('/api/orders/', {}, format='json')
        assert response.data['server_id'] == 'server-1'

        response = client_venue_a.post('/api/orders/', {'server_id': 'server-2'}, format='json')
        assert response.data['server_id'] == 'server-2'

    def test_invalid_order_type(self, client_venue_a):
        response = client_venue_a.post('/api/orders/', {'order_type': 'drive_thru'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_items_and_totals(self, client_venue_a):
        """
        CRITICAL: Totals returned by the API match the printed check
        """
        order_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']

        response = _add_scenario_items(client_venue_a, order_id)
        assert response.status_code == status.HTTP_201_CREATED, response.data
        assert response.data['modifier_total'] == '3.00'
        assert response.data['total'] == '15.00'
        assert len(response.data['modifiers']) == 1

        order = client_venue_a.get(f'/api/orders/{order_id}/').data
        assert order['subtotal'] == '28.00'
        assert order['tax'] == '2.31'
        assert order['total'] == '30.31'
        assert len(order['items']) == 2

    def test_add_catalog_item(self, client_venue_a, menu_item_venue_a, modifier_venue_a):
        order_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']

        response = client_venue_a.post(f'/api/orders/{order_id}/items/', {
            'menu_item_id': str(menu_item_venue_a.id),
            'modifiers': [{'modifier_id': str(modifier_venue_a.id)}],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED, response.data
        assert response.data['name'] == 'Cheeseburger'
        assert response.data['total'] == '13.50'

    def test_add_item_requires_name_and_price(self, client_venue_a):
        order_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']
        response = client_venue_a.post(f'/api/orders/{order_id}/items/', {'quantity': 1}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_negative_price_is_validation_error(self, client_venue_a):
        order_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']

        response = client_venue_a.post(f'/api/orders/{order_id}/items/', {
            'name': 'Soda', 'price': '-2.00',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'validation_error'
        assert response.data['field'] == 'price'

    def test_update_and_remove_item(self, client_venue_a):
        order_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']
        item_id = _add_scenario_items(client_venue_a, order_id).data['id']

        response = client_venue_a.patch(
            f'/api/orders/{order_id}/items/{item_id}/', {'quantity': 2}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK, response.data
        assert response.data['total'] == '27.00'

        response = client_venue_a.delete(f'/api/orders/{order_id}/items/{item_id}/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['subtotal'] == '13.00'
        assert len(response.data['items']) == 1

    def test_item_must_belong_to_order(self, client_venue_a):
        first_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']
        second_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']
        item_id = _add_scenario_items(client_venue_a, first_id).data['id']

        response = client_venue_a.delete(f'/api/orders/{second_id}/items/{item_id}/')
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_items(self, client_venue_a):
        order_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']
        _add_scenario_items(client_venue_a, order_id)

        response = client_venue_a.get(f'/api/orders/{order_id}/items/')
        assert response.status_code == status.HTTP_200_OK
        assert [item['name'] for item in response.data] == ['Fries', 'Burger']


@pytest.mark.django_db
@pytest.mark.integration
class TestOrderStatusEndpoints:

    def _order_with_items(self, client):
        order_id = client.post('/api/orders/', {}, format='json').data['id']
        _add_scenario_items(client, order_id)
        return order_id

    def test_send_then_complete(self, client_venue_a):
        order_id = self._order_with_items(client_venue_a)

        response = client_venue_a.post(f'/api/orders/{order_id}/send/')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'sent'
        assert {item['status'] for item in response.data['items']} == {'sent'}

        response = client_venue_a.post(f'/api/orders/{order_id}/complete/')
        assert response.data['status'] == 'completed'
        assert response.data['completed_at'] is not None

    def test_complete_twice_is_conflict(self, client_venue_a):
        order_id = self._order_with_items(client_venue_a)
        client_venue_a.post(f'/api/orders/{order_id}/complete/')

        response = client_venue_a.post(f'/api/orders/{order_id}/complete/')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data == {'error': 'Cannot complete order twice', 'code': 'already_completed'}

    def test_send_empty_order_is_conflict(self, client_venue_a):
        order_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']

        response = client_venue_a.post(f'/api/orders/{order_id}/send/')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error'] == 'Cannot send empty order'

    def test_add_item_after_send_is_conflict(self, client_venue_a):
        order_id = self._order_with_items(client_venue_a)
        client_venue_a.post(f'/api/orders/{order_id}/send/')

        response = client_venue_a.post(f'/api/orders/{order_id}/items/', {
            'name': 'Pie', 'price': '5.00',
        }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'order_closed'

    def test_void_and_cancel(self, client_venue_a):
        voided = self._order_with_items(client_venue_a)
        cancelled = self._order_with_items(client_venue_a)

        assert client_venue_a.post(f'/api/orders/{voided}/void/').data['status'] == 'voided'
        assert client_venue_a.post(f'/api/orders/{cancelled}/cancel/').data['status'] == 'cancelled'

    def test_discount(self, client_venue_a):
        order_id = self._order_with_items(client_venue_a)

        response = client_venue_a.post(f'/api/orders/{order_id}/discount/', {'amount': '5.00'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['discount'] == '5.00'
        assert response.data['total'] == '25.31'

        response = client_venue_a.post(f'/api/orders/{order_id}/discount/', {'amount': '50.00'}, format='json')
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'discount_exceeds_subtotal'


@pytest.mark.django_db
@pytest.mark.integration
class TestOrderListing:

    def test_list_newest_first_and_paginated(self, client_venue_a):
        ids = [client_venue_a.post('/api/orders/', {}, format='json').data['id'] for _ in range(3)]

        response = client_venue_a.get('/api/orders/?limit=2')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 3
        assert [o['id'] for o in response.data['results']] == [ids[2], ids[1]]

    def test_filter_by_status(self, client_venue_a):
        open_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']
        cancelled_id = client_venue_a.post('/api/orders/', {}, format='json').data['id']
        client_venue_a.post(f'/api/orders/{cancelled_id}/cancel/')

        response = client_venue_a.get('/api/orders/?status=cancelled')
        assert [o['id'] for o in response.data['results']] == [cancelled_id]

        response = client_venue_a.get('/api/orders/open/')
        assert [o['id'] for o in response.data['results']] == [open_id]

    def test_unknown_order_is_not_found(self, client_venue_a):
        response = client_venue_a.get(f'/api/orders/{uuid.uuid4()}/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'Order not found', 'code': 'not_found'}


@pytest.mark.django_db
@pytest.mark.venue_isolation
class TestOrderVenueIsolationApi:

    def test_cannot_read_other_venue_order(self, client_venue_b, order_venue_a):
        """
        CRITICAL: Venue B must never see Venue A's tab

        Security Impact: Data leakage between restaurants
        """
        response = client_venue_b.get(f'/api/orders/{order_venue_a.id}/')
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_cannot_mutate_other_venue_order(self, client_venue_b, order_venue_a):
        response = client_venue_b.post(f'/api/orders/{order_venue_a.id}/items/', {
            'name': 'Soda', 'price': '2.00',
        }, format='json')
        assert response.status_code == status.HTTP_404_NOT_FOUND

        set_current_venue(order_venue_a.venue)
        assert not Order.objects.get(id=order_venue_a.id).items.exists()

    def test_list_only_own_orders(self, client_venue_b, order_venue_a, order_venue_b):
        response = client_venue_b.get('/api/orders/')
        assert [o['id'] for o in response.data['results']] == [str(order_venue_b.id)]

    def test_missing_venue_header(self, api_client, db):
        response = api_client.get('/api/orders/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['code'] == 'VENUE_NOT_FOUND'
