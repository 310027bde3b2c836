"""
Booking JSON API — thin HTTP layer over `apps.bookings.engine`.

  GET  /bookings/api/<business_id>/dates/?service_id=&start=YYYY-MM-DD&end=YYYY-MM-DD
  GET  /bookings/api/<business_id>/slots/?service_id=&date=YYYY-MM-DD
  POST /bookings/api/<business_id>/reserve/          (JSON body, optional Idempotency-Key header)
  GET  /bookings/api/booking/<booking_id>/
  POST /bookings/api/booking/<booking_id>/cancel/
  POST /bookings/api/booking/<booking_id>/check-in/

Engine errors are rendered as {"error": {"code", "message", "field"}} with the
status carried by the exception class. Authentication is handled upstream,
so these endpoints are CSRF-exempt.
"""
import json
import logging
from datetime import date as date_type, datetime
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from . import engine
from .domain import DateRange
from .exceptions import BookingEngineError, ValidationError
from .forms import ReserveForm

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _parse_date(value, field: str) -> date_type:
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (ValueError, TypeError):
        raise ValidationError('Expected a date in YYYY-MM-DD format.', field=field)


def _parse_start(value) -> datetime:
    if not value:
        raise ValidationError('A start time is required.', field='start_time')
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        raise ValidationError('Expected an ISO-8601 start time, e.g. 2025-03-14T10:00.', field='start_time')


def _json_body(request) -> dict:
    if not request.body:
        return {}
    try:
        body = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError('Request body must be valid JSON.')
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object.')
    return body


def _iso(moment):
    return moment.isoformat() if moment else None


def _booking_json(booking) -> dict:
    return {
        'id': str(booking.id),
        'reference': str(booking.id)[:8].upper(),
        'business_id': str(booking.business_id),
        'service_id': str(booking.service_id),
        'customer_id': booking.customer_id,
        'date': booking.booking_date.isoformat(),
        'start_time': booking.start.strftime('%H:%M'),
        'end_time': booking.end.strftime('%H:%M'),
        'status': str(booking.status),
        'amount': str(booking.amount),
        'hold_expires_at': _iso(booking.hold_expires_at),
        'checked_in_at': _iso(booking.checked_in_at),
        'cancellation_reason': booking.cancellation_reason,
    }


def _error_response(exc: BookingEngineError) -> JsonResponse:
    return JsonResponse({'error': exc.as_dict()}, status=exc.status)


def api_view(view):
    """Render engine errors as JSON instead of letting them become 500s."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except BookingEngineError as exc:
            if exc.status >= 500:
                logger.error('%s failed: %s', view.__name__, exc.message)
            return _error_response(exc)
    return wrapper


# ─────────────────────────────────────────────────────────────────────────────
# Availability
# ─────────────────────────────────────────────────────────────────────────────

@csrf_exempt
@require_GET
@api_view
def api_dates(request, business_id):
    service_id = request.GET.get('service_id')
    date_range = DateRange(
        _parse_date(request.GET.get('start'), 'start'),
        _parse_date(request.GET.get('end'), 'end'),
    )
    dates = engine.get_available_dates(business_id, service_id, date_range)
    return JsonResponse({
        'business_id': str(business_id),
        'service_id': service_id,
        'dates': [d.isoformat() for d in sorted(dates)],
    })


@csrf_exempt
@require_GET
@api_view
def api_slots(request, business_id):
    service_id = request.GET.get('service_id')
    day = _parse_date(request.GET.get('date'), 'date')
    slots = engine.get_time_slots(business_id, service_id, day)
    return JsonResponse({
        'business_id': str(business_id),
        'service_id': service_id,
        'date': day.isoformat(),
        'slots': [s.to_dict() for s in slots],
    })


# ─────────────────────────────────────────────────────────────────────────────
# Reservation & lifecycle
# ─────────────────────────────────────────────────────────────────────────────

@csrf_exempt
@require_POST
@api_view
def api_reserve(request, business_id):
    body = _json_body(request)
    data = dict(body)
    if request.headers.get('Idempotency-Key'):
        data['idempotency_key'] = request.headers['Idempotency-Key']

    form = ReserveForm(data)
    if not form.is_valid():
        field, message = form.first_error()
        raise ValidationError(message, field=field)
    cleaned = form.cleaned_data

    booking = engine.reserve(
        business_id,
        cleaned['service_id'],
        cleaned['customer_id'],
        _parse_start(cleaned['start_time']),
        cleaned['idempotency_key'] or None,
        customer_name=cleaned['customer_name'],
        customer_email=cleaned['customer_email'],
        customer_phone=cleaned['customer_phone'],
        notes=cleaned['notes'],
    )
    return JsonResponse({'booking': _booking_json(booking)}, status=201)


@csrf_exempt
@require_GET
@api_view
def api_booking_detail(request, booking_id):
    return JsonResponse({'booking': _booking_json(engine.get_booking(booking_id))})


@csrf_exempt
@require_POST
@api_view
def api_booking_cancel(request, booking_id):
    body = _json_body(request)
    cancelled = engine.cancel(
        booking_id,
        actor=body.get('actor') or 'customer',
        reason=body.get('reason', ''),
    )
    return JsonResponse({'cancelled': cancelled, 'booking': _booking_json(engine.get_booking(booking_id))})


@csrf_exempt
@require_POST
@api_view
def api_booking_check_in(request, booking_id):
    checked_in = engine.check_in(booking_id)
    return JsonResponse({'checked_in': checked_in, 'booking': _booking_json(engine.get_booking(booking_id))})
