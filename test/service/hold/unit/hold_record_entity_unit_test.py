from datetime import datetime, timedelta, timezone

import pytest
from uuid_utils import uuid7

from src.service.hold.domain.entity import HoldRecord
from src.service.hold.domain.enum import HoldStatus, ReleaseReason
from src.service.hold.domain.hold_errors import HoldNotActiveError, InvalidHoldRequestError


NOW = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)


def _create(**overrides) -> HoldRecord:
    kwargs = {
        'inventory_id': uuid7(),
        'held_by': 'user-1',
        'unit_ids': ['S1', 'S2'],
        'quantity': 2,
        'hold_expiry': timedelta(minutes=10),
        'now': NOW,
    }
    return HoldRecord.create(**(kwargs | overrides))


@pytest.mark.unit
class TestHoldRecord:
    def test_create_sets_expiry_from_now(self):
        hold = _create()

        assert hold.status == HoldStatus.ACTIVE
        assert hold.created_at == NOW
        assert hold.expires_at == NOW + timedelta(minutes=10)
        assert hold.is_active
        assert not hold.is_expired(now=NOW + timedelta(minutes=9))
        assert hold.is_expired(now=NOW + timedelta(minutes=10))

    @pytest.mark.parametrize(
        'overrides',
        [
            {'quantity': 0, 'unit_ids': []},
            {'quantity': 3},
            {'hold_expiry': timedelta(0)},
            {'held_by': ''},
        ],
    )
    def test_create_rejects_invalid_input(self, overrides):
        with pytest.raises(InvalidHoldRequestError):
            _create(**overrides)

    def test_release_is_terminal(self):
        released = _create().release(reason=ReleaseReason.CANCELLED, now=NOW)

        assert released.status == HoldStatus.RELEASED
        assert released.release_reason == ReleaseReason.CANCELLED
        assert released.released_at == NOW

        with pytest.raises(HoldNotActiveError):
            released.release(reason=ReleaseReason.EXPIRED, now=NOW)
        with pytest.raises(HoldNotActiveError):
            released.convert(booking_reference='BK-1', now=NOW)

    def test_convert_records_booking_reference(self):
        converted = _create().convert(booking_reference='BK-1', now=NOW)

        assert converted.status == HoldStatus.CONVERTED
        assert converted.booking_reference == 'BK-1'
        assert converted.release_reason is None

        with pytest.raises(HoldNotActiveError):
            converted.release(reason=ReleaseReason.EXPIRED, now=NOW)

    def test_convert_needs_booking_reference(self):
        with pytest.raises(InvalidHoldRequestError):
            _create().convert(booking_reference='', now=NOW)
