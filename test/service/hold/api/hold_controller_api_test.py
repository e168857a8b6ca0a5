"""
API tests for the hold controller

HTTP mapping of hold outcomes: 201 on success, 409 for quota / unit conflicts and
informational already-terminal releases, 404 not found, 422 inactive or disabled,
400 invalid input.
"""

from datetime import datetime, timezone

from fastapi.testclient import TestClient
import pytest
from uuid_utils import uuid7

from src.service.hold.domain.domain_event.hold_domain_event import HoldReleasedEvent
from src.service.hold.domain.enum import ReleaseReason
from src.service.hold.driving_adapter.http_controller.hold_controller import _serialize_event


BASE = '/api/hold'


def _publish_bus(client: TestClient, *, seats: int = 40, partner_id: str = 'bus-co') -> str:
    response = client.post(
        f'{BASE}/inventory',
        json={
            'category': 'bus',
            'schedule_id': f'BUS-{uuid7()}',
            'partner_id': partner_id,
            'unit_ids': [f'S{i:03d}' for i in range(1, seats + 1)],
        },
    )
    assert response.status_code == 201, response.text
    return response.json()['id']


def _publish_hotel(client: TestClient, *, rooms: int = 100, partner_id: str = 'hotel-co') -> str:
    response = client.post(
        f'{BASE}/inventory',
        json={
            'category': 'hotel',
            'schedule_id': f'HOTEL-{uuid7()}',
            'sub_key': 'twin',
            'partner_id': partner_id,
            'unit_count': rooms,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()['id']


def _hold_seats(client: TestClient, inventory_id: str, seats: list[str], held_by: str = 'u1'):
    return client.post(
        f'{BASE}/holds',
        json={
            'inventory_id': inventory_id,
            'held_by': held_by,
            'category': 'bus',
            'unit_ids': seats,
        },
    )


@pytest.mark.api
class TestHoldController:
    def test_publish_inventory(self, client: TestClient):
        response = client.post(
            f'{BASE}/inventory',
            json={
                'category': 'bus',
                'schedule_id': 'BUS-TPE-TXG-0900',
                'partner_id': 'bus-co',
                'unit_ids': ['1A', '1B', '1C'],
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body['total_units'] == 3
        assert body['available_units'] == 3
        assert body['sub_key'] == 'default'
        assert body['status'] == 'active'

    def test_publish_duplicate_inventory_conflicts(self, client: TestClient):
        payload = {
            'category': 'hotel',
            'schedule_id': 'HOTEL-DUP',
            'partner_id': 'hotel-co',
            'unit_count': 5,
        }
        assert client.post(f'{BASE}/inventory', json=payload).status_code == 201

        response = client.post(f'{BASE}/inventory', json=payload)

        assert response.status_code == 409
        assert 'already exists' in response.json()['detail']

    def test_request_hold(self, client: TestClient):
        inventory_id = _publish_bus(client)

        response = _hold_seats(client, inventory_id, ['S001', 'S002'])

        assert response.status_code == 201
        body = response.json()
        assert body['status'] == 'active'
        assert body['quantity'] == 2
        assert body['unit_ids'] == ['S001', 'S002']
        assert body['inventory_id'] == inventory_id

        fetched = client.get(f'{BASE}/holds/{body["id"]}')
        assert fetched.status_code == 200
        assert fetched.json()['id'] == body['id']

    def test_seat_already_held(self, client: TestClient):
        inventory_id = _publish_bus(client)
        _hold_seats(client, inventory_id, ['S001'])

        response = _hold_seats(client, inventory_id, ['S001', 'S002'], held_by='u2')

        assert response.status_code == 409
        body = response.json()
        assert body['outcome'] == 'unit_unavailable'
        assert body['unavailable_units'] == ['S001']

    def test_quota_exceeded(self, client: TestClient):
        inventory_id = _publish_hotel(client, rooms=100)
        payload = {'inventory_id': inventory_id, 'held_by': 'u', 'category': 'hotel'}
        assert client.post(f'{BASE}/holds', json=payload | {'quantity': 20}).status_code == 201

        response = client.post(f'{BASE}/holds', json=payload | {'quantity': 10})

        assert response.status_code == 409
        body = response.json()
        assert body['outcome'] == 'quota_exceeded'
        assert body['max_allowed'] == 25
        assert body['currently_held'] == 20
        assert body['detail'] == 'Hold quota exceeded. Max allowed: 25, Currently held: 20'

    def test_hold_on_unknown_inventory(self, client: TestClient):
        response = _hold_seats(client, str(uuid7()), ['S001'])

        assert response.status_code == 404
        assert response.json()['outcome'] == 'not_found'

    def test_hold_needs_units_or_quantity(self, client: TestClient):
        response = client.post(
            f'{BASE}/holds',
            json={'inventory_id': str(uuid7()), 'held_by': 'u', 'category': 'bus'},
        )

        assert response.status_code == 400

    def test_flight_hold_is_invalid(self, client: TestClient):
        response = client.post(
            f'{BASE}/holds',
            json={
                'inventory_id': str(uuid7()),
                'held_by': 'u',
                'category': 'flight',
                'quantity': 1,
            },
        )

        assert response.status_code == 400
        assert response.json()['outcome'] == 'invalid_request'

    def test_hold_disabled_for_partner(self, client: TestClient):
        inventory_id = _publish_bus(client, partner_id='direct-only-bus')
        policy = client.patch(
            f'{BASE}/partners/direct-only-bus/hold-policy', json={'hold_enabled': False}
        )
        assert policy.status_code == 200

        response = _hold_seats(client, inventory_id, ['S001'])

        assert response.status_code == 422
        assert response.json()['outcome'] == 'policy_disabled'

    def test_retired_inventory_refuses_holds(self, client: TestClient):
        inventory_id = _publish_bus(client)
        retired = client.post(f'{BASE}/inventory/{inventory_id}/retire')
        assert retired.status_code == 200
        assert retired.json()['status'] == 'retired'

        response = _hold_seats(client, inventory_id, ['S001'])

        assert response.status_code == 422
        assert response.json()['outcome'] == 'inactive_schedule'

    def test_release_then_release_again(self, client: TestClient):
        inventory_id = _publish_bus(client)
        hold_id = _hold_seats(client, inventory_id, ['S001', 'S002']).json()['id']

        first = client.post(f'{BASE}/holds/{hold_id}/release')
        assert first.status_code == 200
        assert first.json()['outcome'] == 'success'
        assert first.json()['hold']['release_reason'] == 'cancelled'

        second = client.post(f'{BASE}/holds/{hold_id}/release')
        assert second.status_code == 409
        assert second.json()['outcome'] == 'already_terminal'

        quota = client.get(f'{BASE}/inventory/{inventory_id}/quota').json()
        assert quota['currently_held'] == 0
        assert quota['available_units'] == 40

    def test_release_unknown_hold(self, client: TestClient):
        response = client.post(f'{BASE}/holds/{uuid7()}/release')

        assert response.status_code == 404

    def test_convert_hold(self, client: TestClient):
        inventory_id = _publish_bus(client)
        hold_id = _hold_seats(client, inventory_id, ['S005']).json()['id']

        response = client.post(
            f'{BASE}/holds/{hold_id}/convert', json={'booking_reference': 'BK-2026-0042'}
        )
        assert response.status_code == 200
        assert response.json()['hold']['status'] == 'converted'
        assert response.json()['already_converted'] is False

        retry = client.post(
            f'{BASE}/holds/{hold_id}/convert', json={'booking_reference': 'BK-2026-0042'}
        )
        assert retry.status_code == 200
        assert retry.json()['already_converted'] is True

        other = client.post(
            f'{BASE}/holds/{hold_id}/convert', json={'booking_reference': 'BK-OTHER'}
        )
        assert other.status_code == 409
        assert other.json()['outcome'] == 'not_active'

        quota = client.get(f'{BASE}/inventory/{inventory_id}/quota').json()
        assert quota['booked_units'] == 1
        assert quota['currently_held'] == 0

    def test_quota_status(self, client: TestClient):
        inventory_id = _publish_hotel(client, rooms=100)
        client.post(
            f'{BASE}/holds',
            json={'inventory_id': inventory_id, 'held_by': 'u', 'category': 'hotel', 'quantity': 7},
        )

        response = client.get(f'{BASE}/inventory/{inventory_id}/quota')

        assert response.status_code == 200
        body = response.json()
        assert body['total_units'] == 100
        assert body['max_holdable'] == 25
        assert body['currently_held'] == 7
        assert body['available_for_hold'] == 18
        assert body['hold_expiry_minutes'] == 30
        assert body['active_hold_records'] == 1

    def test_quota_status_unknown_inventory(self, client: TestClient):
        response = client.get(f'{BASE}/inventory/{uuid7()}/quota')

        assert response.status_code == 404

    def test_active_hold_by_holder(self, client: TestClient):
        inventory_id = _publish_bus(client)
        hold_id = _hold_seats(client, inventory_id, ['S010'], held_by='checkout-7').json()['id']

        found = client.get(
            f'{BASE}/inventory/{inventory_id}/holds/active', params={'held_by': 'checkout-7'}
        )
        missing = client.get(
            f'{BASE}/inventory/{inventory_id}/holds/active', params={'held_by': 'checkout-8'}
        )

        assert found.status_code == 200
        assert found.json()['id'] == hold_id
        assert missing.status_code == 404

    def test_partner_policy_update_changes_quota(self, client: TestClient):
        inventory_id = _publish_hotel(client, rooms=100, partner_id='policy-hotel')

        response = client.patch(
            f'{BASE}/partners/policy-hotel/hold-policy',
            json={'quota_percentage': 50, 'hold_expiry_minutes': 10},
        )

        assert response.status_code == 200
        assert response.json()['hold_quota_percentage'] == 50
        quota = client.get(f'{BASE}/inventory/{inventory_id}/quota').json()
        assert quota['max_holdable'] == 50
        assert quota['hold_expiry_minutes'] == 10

    @pytest.mark.parametrize(
        'payload', [{'quota_percentage': 150}, {'hold_expiry_minutes': 1}]
    )
    def test_partner_policy_update_validation(self, client: TestClient, payload):
        response = client.patch(f'{BASE}/partners/bus-co/hold-policy', json=payload)

        assert response.status_code == 400

    def test_invalid_hold_id(self, client: TestClient):
        response = client.get(f'{BASE}/holds/not-a-uuid')

        assert response.status_code == 400

    def test_health_and_metrics(self, client: TestClient):
        assert client.get('/health').json()['status'] == 'healthy'

        inventory_id = _publish_bus(client)
        _hold_seats(client, inventory_id, ['S001'])
        metrics = client.get('/metrics')

        assert metrics.status_code == 200
        assert 'hold_requests_total' in metrics.text


@pytest.mark.unit
class TestSerializeEvent:
    def test_event_name_and_json_payload(self):
        event = HoldReleasedEvent(
            hold_id=uuid7(),
            inventory_id=uuid7(),
            reason=ReleaseReason.EXPIRED,
            quantity=2,
            unit_ids=['S001', 'S002'],
            released_at=datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc),
        )

        message = _serialize_event(event)

        assert message['event'] == 'hold_released'
        assert f'"hold_id":"{event.hold_id}"' in message['data']
        assert '"reason":"expired"' in message['data']
        assert '"released_at":"2026-01-01T09:00:00+00:00"' in message['data']
