import hashlib
import hmac
import json
from datetime import datetime, time

import pytest
from django.urls import reverse

from apps.bookings import engine
from apps.bookings.lifecycle import BookingStatus
from apps.bookings.models import Booking
from apps.payments.models import PaymentEvent, PaymentEventOutcome

pytestmark = pytest.mark.django_db


@pytest.fixture
def pending_booking(make_business, make_service, next_week):
    business = make_business()
    service = make_service(business)
    record = engine.reserve(business.id, service.id, 'cust-1', datetime.combine(next_week, time(10, 0)))
    return Booking.objects.get(pk=record.id)


def event(event_id, event_type, booking_id=None, payment_id='pay_001'):
    notes = {'booking_id': str(booking_id)} if booking_id else {}
    return {
        'id': event_id,
        'event': event_type,
        'payload': {'payment': {'entity': {'id': payment_id, 'notes': notes}}},
    }


def deliver(client, payload, secret='test-webhook-secret', signature=None):
    body = json.dumps(payload).encode()
    if signature is None:
        signature = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return client.post(
        reverse('payments:webhook'), data=body, content_type='application/json',
        headers={'X-Payment-Signature': signature},
    )


def test_captured_payment_confirms_booking(client, pending_booking):
    resp = deliver(client, event('evt_1', 'payment.captured', pending_booking.id))

    assert resp.status_code == 200
    assert resp.json() == {'status': 'confirmed'}
    pending_booking.refresh_from_db()
    assert pending_booking.status == BookingStatus.CONFIRMED

    recorded = PaymentEvent.objects.get(event_id='evt_1')
    assert recorded.booking_id == pending_booking.id
    assert recorded.payment_reference == 'pay_001'
    assert recorded.outcome == PaymentEventOutcome.CONFIRMED


def test_redelivery_is_a_duplicate(client, pending_booking):
    deliver(client, event('evt_1', 'payment.captured', pending_booking.id))
    resp = deliver(client, event('evt_1', 'payment.captured', pending_booking.id))

    assert resp.json() == {'status': 'duplicate'}
    assert PaymentEvent.objects.count() == 1


def test_capture_after_cancellation_is_noop(client, pending_booking):
    engine.cancel(pending_booking.id)
    resp = deliver(client, event('evt_2', 'payment.captured', pending_booking.id))

    assert resp.json() == {'status': 'noop'}
    pending_booking.refresh_from_db()
    assert pending_booking.status == BookingStatus.CANCELLED


def test_failed_payment_is_recorded_only(client, pending_booking):
    resp = deliver(client, event('evt_3', 'payment.failed', pending_booking.id))

    assert resp.json() == {'status': 'recorded'}
    pending_booking.refresh_from_db()
    assert pending_booking.status == BookingStatus.PENDING


def test_unknown_booking_is_unmatched(client, db):
    resp = deliver(client, event('evt_4', 'payment.captured'))

    assert resp.json() == {'status': 'unmatched'}
    assert PaymentEvent.objects.get(event_id='evt_4').booking is None


def test_bad_signature_is_rejected(client, pending_booking):
    resp = deliver(client, event('evt_5', 'payment.captured', pending_booking.id), signature='forged')

    assert resp.status_code == 400
    assert not PaymentEvent.objects.exists()
    pending_booking.refresh_from_db()
    assert pending_booking.status == BookingStatus.PENDING


def test_event_without_id_is_rejected(client, db):
    resp = deliver(client, {'event': 'payment.captured'})
    assert resp.status_code == 400


def test_unsigned_webhook_accepted_when_secret_unset(client, settings, pending_booking):
    settings.PAYMENT_WEBHOOK_SECRET = ''
    resp = deliver(client, event('evt_6', 'payment.captured', pending_booking.id), signature='')
    assert resp.json() == {'status': 'confirmed'}


def test_get_not_allowed(client, db):
    assert client.get(reverse('payments:webhook')).status_code == 405


def test_non_ascii_signature_is_rejected(client, pending_booking):
    resp = deliver(client, event('evt_7', 'payment.captured', pending_booking.id), signature='é' * 64)

    assert resp.status_code == 400
    pending_booking.refresh_from_db()
    assert pending_booking.status == BookingStatus.PENDING
