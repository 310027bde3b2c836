"""
Payment processor webhook.

The processor is the authority on payment success; this endpoint turns its
`payment.captured` event into a booking confirmation. Payment capture,
refunds and receipts live with the processor, not here.

Flow:
  1. Verify the HMAC-SHA256 signature of the raw body (X-Payment-Signature).
  2. Skip events whose id was already processed (processors redeliver).
  3. payment.captured → engine.confirm(booking_id) (a no-op if the hold expired
     or the booking was cancelled first).
     payment.failed   → recorded only; the hold simply runs out.
  4. Record the event and answer 200.
"""
import hashlib
import hmac
import json
import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.bookings import engine
from apps.bookings.exceptions import BookingEngineError, BookingNotFound
from apps.bookings.models import Booking

from .models import PaymentEvent, PaymentEventOutcome

logger = logging.getLogger(__name__)

CAPTURED = 'payment.captured'
FAILED = 'payment.failed'


def _verify_webhook_signature(raw_body: bytes, signature: str) -> bool:
    """Verify the processor's webhook signature."""
    secret = settings.PAYMENT_WEBHOOK_SECRET.encode()
    computed = hmac.new(key=secret, msg=raw_body, digestmod=hashlib.sha256).hexdigest()
    return hmac.compare_digest(computed.encode(), signature.encode())


def _payment_entity(payload: dict) -> dict:
    try:
        entity = payload['payload']['payment']['entity']
    except (KeyError, TypeError):
        return {}
    return entity if isinstance(entity, dict) else {}


def _booking_for(entity: dict):
    notes = entity.get('notes') or {}
    booking_id = notes.get('booking_id') if isinstance(notes, dict) else None
    if not booking_id:
        return None
    try:
        return Booking.objects.filter(pk=booking_id).first()
    except (ValueError, DjangoValidationError):
        return None


@csrf_exempt
@require_POST
def payment_webhook(request):
    """
    Payment processor fires this endpoint for every payment event.
    Must be CSRF-exempt; security comes from the HMAC-SHA256 signature check.
    """
    raw_body = request.body
    signature = request.headers.get('X-Payment-Signature', '')

    # Skip signature check if webhook secret not configured (dev convenience)
    if settings.PAYMENT_WEBHOOK_SECRET:
        if not _verify_webhook_signature(raw_body, signature):
            logger.warning('Webhook signature verification failed.')
            return HttpResponse(status=400)
    else:
        logger.warning('PAYMENT_WEBHOOK_SECRET is not set; accepting unsigned webhook.')

    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return HttpResponse(status=400)
    if not isinstance(payload, dict):
        return HttpResponse(status=400)

    event = payload.get('event', '')
    event_id = payload.get('id', '')
    if not event_id:
        logger.warning('Webhook event without an id — rejecting.')
        return HttpResponse(status=400)

    # Idempotency: skip if already processed
    if PaymentEvent.objects.filter(event_id=event_id).exists():
        logger.info('Webhook event %s already processed — skipping.', event_id)
        return JsonResponse({'status': 'duplicate'})

    entity = _payment_entity(payload)
    booking = _booking_for(entity)

    if booking is None:
        outcome = PaymentEventOutcome.UNMATCHED
        logger.warning('Webhook %s (%s): no matching booking', event_id, event)
    elif event == CAPTURED:
        try:
            confirmed = engine.confirm(booking.id, changed_by='webhook')
        except BookingNotFound:
            confirmed = False
        except BookingEngineError as exc:
            # Not recorded, so the processor's redelivery retries the confirmation.
            logger.error('Webhook %s: could not confirm booking %s: %s', event_id, booking.id, exc.message)
            return HttpResponse(status=503)
        outcome = PaymentEventOutcome.CONFIRMED if confirmed else PaymentEventOutcome.NOOP
        logger.info('Webhook %s: booking %s %s', event_id, booking.id,
                    'confirmed' if confirmed else 'already settled, confirmation ignored')
    else:
        if event == FAILED:
            logger.info('Webhook %s: payment failed for booking %s; hold left to expire', event_id, booking.id)
        outcome = PaymentEventOutcome.RECORDED

    try:
        PaymentEvent.objects.create(
            event_id=event_id,
            event_type=event,
            booking=booking,
            payment_reference=str(entity.get('id', ''))[:100],
            payload=payload,
            outcome=outcome,
        )
    except IntegrityError:
        # A concurrent delivery of the same event recorded it first.
        logger.info('Webhook event %s recorded concurrently — skipping.', event_id)
        return JsonResponse({'status': 'duplicate'})

    return JsonResponse({'status': str(outcome)})
