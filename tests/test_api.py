"""
Tests for the box JSON API and the pool status endpoint.
"""
import json

import pytest
from django.urls import reverse

from inventory.box_utils import create_box
from inventory.models import Box, BoxNumberPool, Item

pytestmark = pytest.mark.django_db


def _post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


class TestAuthentication:
    """Test that the API requires a logged-in user."""

    @pytest.mark.parametrize('name,kwargs', [
        ('inventory:box_list', {}),
        ('inventory:box_detail', {'pk': 1}),
        ('inventory:box_number_status', {}),
    ])
    def test_anonymous_is_redirected_to_login(self, client, name, kwargs):
        response = client.get(reverse(name, kwargs=kwargs))
        assert response.status_code == 302
        assert '/admin/login/' in response.url

    def test_anonymous_cannot_create(self, client):
        response = _post_json(client, reverse('inventory:box_list'), {'current_room': 'Hall'})

        assert response.status_code == 302
        assert Box.objects.count() == 0


class TestBoxList:

    def test_list_highest_number_first(self, authenticated_client):
        for room in ('Kitchen', 'Garage', 'Attic'):
            create_box(current_room=room)

        response = authenticated_client.get(reverse('inventory:box_list'))

        assert response.status_code == 200
        data = response.json()
        assert data['ok'] is True
        assert data['count'] == 3
        assert [box['box_number'] for box in data['boxes']] == [3, 2, 1]

    def test_list_order_follows_number_not_insertion(self, authenticated_client):
        """Test that a reused low number still sorts last."""
        first, _, _ = [create_box() for _ in range(3)]
        Item.objects.create(box=first, name='Lamp')
        authenticated_client.post(reverse('inventory:box_delete', kwargs={'pk': first.pk}))
        create_box(current_room='Hall')

        data = authenticated_client.get(reverse('inventory:box_list')).json()

        assert [box['box_number'] for box in data['boxes']] == [3, 2, 1]
        assert data['boxes'][-1]['current_room'] == 'Hall'

    def test_list_includes_item_count(self, authenticated_client):
        box = create_box(current_room='Office')
        Item.objects.create(box=box, name='Lamp')
        Item.objects.create(box=box, name='Books')

        data = authenticated_client.get(reverse('inventory:box_list')).json()

        assert data['boxes'][0]['item_count'] == 2

    def test_create_json(self, authenticated_client):
        response = _post_json(authenticated_client, reverse('inventory:box_list'), {
            'current_room': 'Kitchen',
            'target_room': 'New kitchen',
            'is_fragile': True,
        })

        assert response.status_code == 201
        box = response.json()['box']
        assert box['box_number'] == 1
        assert box['current_room'] == 'Kitchen'
        assert box['is_fragile'] is True
        assert box['item_count'] == 0
        assert BoxNumberPool.objects.get(box_number=1).is_available is False

    def test_create_form_encoded(self, authenticated_client):
        response = authenticated_client.post(
            reverse('inventory:box_list'),
            {'current_room': 'Garage', 'description': 'Winter tyres'},
        )

        assert response.status_code == 201
        assert response.json()['box']['box_number'] == 1

    def test_client_supplied_box_number_is_ignored(self, authenticated_client):
        response = _post_json(authenticated_client, reverse('inventory:box_list'), {
            'current_room': 'Kitchen',
            'box_number': 99,
        })

        assert response.status_code == 201
        assert response.json()['box']['box_number'] == 1
        assert not BoxNumberPool.objects.filter(box_number=99).exists()

    def test_create_reuses_freed_number(self, authenticated_client):
        boxes = [create_box() for _ in range(3)]
        authenticated_client.post(reverse('inventory:box_delete', kwargs={'pk': boxes[0].pk}))

        response = _post_json(authenticated_client, reverse('inventory:box_list'), {})

        assert response.json()['box']['box_number'] == 1

    def test_invalid_json_is_rejected(self, authenticated_client):
        response = authenticated_client.post(
            reverse('inventory:box_list'),
            data='{not json',
            content_type='application/json',
        )

        assert response.status_code == 400
        assert response.json()['ok'] is False
        assert BoxNumberPool.objects.count() == 0

    def test_json_array_is_rejected(self, authenticated_client):
        response = authenticated_client.post(
            reverse('inventory:box_list'),
            data='[1, 2]',
            content_type='application/json',
        )

        assert response.status_code == 400

    def test_overlong_room_is_rejected(self, authenticated_client):
        response = _post_json(authenticated_client, reverse('inventory:box_list'), {
            'current_room': 'x' * 300,
        })

        assert response.status_code == 400
        assert 'current_room' in response.json()['errors']
        assert Box.objects.count() == 0


class TestBoxDetail:

    def test_get_by_id(self, authenticated_client):
        box = create_box(current_room='Hall')

        response = authenticated_client.get(reverse('inventory:box_detail', kwargs={'pk': box.pk}))

        assert response.status_code == 200
        assert response.json()['box']['uuid'] == box.uuid

    def test_get_by_uuid(self, authenticated_client):
        box = create_box(current_room='Hall')

        response = authenticated_client.get(
            reverse('inventory:box_by_uuid', kwargs={'uuid': box.uuid})
        )

        assert response.status_code == 200
        assert response.json()['box']['id'] == box.pk

    def test_unknown_box_returns_json_404(self, authenticated_client):
        response = authenticated_client.get(reverse('inventory:box_detail', kwargs={'pk': 999}))

        assert response.status_code == 404
        assert response.json() == {'ok': False, 'error': 'Not found'}

    def test_partial_update_keeps_other_fields(self, authenticated_client):
        box = create_box(current_room='Kitchen', target_room='Loft')

        response = _post_json(
            authenticated_client,
            reverse('inventory:box_detail', kwargs={'pk': box.pk}),
            {'is_moved_to_target': True},
        )

        assert response.status_code == 200
        data = response.json()['box']
        assert data['is_moved_to_target'] is True
        assert data['current_room'] == 'Kitchen'
        assert data['target_room'] == 'Loft'

    def test_update_cannot_change_box_number(self, authenticated_client):
        box = create_box()

        _post_json(
            authenticated_client,
            reverse('inventory:box_detail', kwargs={'pk': box.pk}),
            {'box_number': 50, 'description': 'Moved'},
        )

        box.refresh_from_db()
        assert box.box_number == 1
        assert box.description == 'Moved'


class TestBoxDelete:

    def test_delete_returns_released_number(self, authenticated_client):
        create_box()
        box = create_box()

        response = authenticated_client.post(reverse('inventory:box_delete', kwargs={'pk': box.pk}))

        assert response.status_code == 200
        assert response.json() == {'ok': True, 'deleted': box.pk, 'released_number': 2}
        assert BoxNumberPool.objects.get(box_number=2).is_available is True

    def test_delete_requires_post(self, authenticated_client):
        box = create_box()

        response = authenticated_client.get(reverse('inventory:box_delete', kwargs={'pk': box.pk}))

        assert response.status_code == 405
        assert Box.objects.filter(pk=box.pk).exists()

    def test_delete_unknown_box(self, authenticated_client):
        response = authenticated_client.post(reverse('inventory:box_delete', kwargs={'pk': 12345}))

        assert response.status_code == 404


@pytest.mark.permissions
class TestPoolStatusEndpoint:

    def test_non_staff_is_forbidden(self, authenticated_client):
        response = authenticated_client.get(reverse('inventory:box_number_status'))

        assert response.status_code == 403
        assert response.json() == {'ok': False, 'error': 'Admin privileges required'}

    def test_staff_sees_pool(self, admin_client, make_pool):
        make_pool(range(1, 6), available={4, 2})

        response = admin_client.get(reverse('inventory:box_number_status'))

        assert response.status_code == 200
        data = response.json()
        assert data['totalNumbers'] == 5
        assert data['availableNumbers'] == 2
        assert data['highestNumber'] == 5
        assert data['nextNumber'] == 2
        assert data['availableNumbersList'] == [2, 4]
        assert data['counters'] == {'release_misses': 0, 'allocation_conflicts': 0}

    def test_empty_pool(self, admin_client):
        data = admin_client.get(reverse('inventory:box_number_status')).json()

        assert data['totalNumbers'] == 0
        assert data['nextNumber'] is None
        assert data['availableNumbersList'] == []

    def test_status_is_not_cached(self, admin_client):
        response = admin_client.get(reverse('inventory:box_number_status'))

        assert 'no-cache' in response['Cache-Control']

    def test_status_is_read_only(self, admin_client):
        response = admin_client.post(reverse('inventory:box_number_status'))

        assert response.status_code == 405
