"""
Booking engine — pure business logic, no HTTP/request awareness.

Public API:
  get_available_dates(business_id, service_id, date_range)
  get_time_slots(business_id, service_id, date)
  reserve(business_id, service_id, customer_id, start_time, idempotency_key=None, **contact)
  get_booking(booking_id)
  confirm(booking_id, changed_by='webhook')
  expire(booking_id)
  cancel(booking_id, actor='customer', reason='')
  check_in(booking_id)
  mark_no_show(booking_id)
  complete(booking_id)
  sweep()

Each call builds the components on the Django repositories and the email
notifier, and retries storage failures (ServiceUnavailable once exhausted).
"""
from apps.businesses.hours import DjangoBusinessHoursProvider
from apps.notifications.emails import EmailNotifier
from apps.services.catalog import DjangoServiceCatalog

from .availability import AvailabilityCalculator
from .exceptions import BookingNotFound
from .repositories import DjangoBookingRepository
from .retry import retry_on_storage_failure
from .scheduler import BookingScheduler
from .slots import SlotGenerator


def _collaborators():
    return DjangoBookingRepository(), DjangoServiceCatalog(), DjangoBusinessHoursProvider()


def availability_calculator() -> AvailabilityCalculator:
    return AvailabilityCalculator(*_collaborators())


def slot_generator() -> SlotGenerator:
    return SlotGenerator(*_collaborators())


def scheduler() -> BookingScheduler:
    bookings, catalog, hours = _collaborators()
    return BookingScheduler(bookings, catalog, hours, notifier=EmailNotifier())


# ── Read paths ────────────────────────────────────────────────────────────────

@retry_on_storage_failure()
def get_available_dates(business_id, service_id, date_range):
    return availability_calculator().get_available_dates(business_id, service_id, date_range)


@retry_on_storage_failure()
def get_time_slots(business_id, service_id, day):
    return slot_generator().get_time_slots(business_id, service_id, day)


@retry_on_storage_failure()
def get_booking(booking_id):
    booking = DjangoBookingRepository().get(booking_id)
    if booking is None:
        raise BookingNotFound(field='booking_id')
    return booking


# ── Write paths ───────────────────────────────────────────────────────────────

@retry_on_storage_failure()
def reserve(business_id, service_id, customer_id, start_time, idempotency_key=None, **contact):
    return scheduler().reserve(business_id, service_id, customer_id, start_time, idempotency_key, **contact)


@retry_on_storage_failure()
def confirm(booking_id, changed_by='webhook'):
    return scheduler().confirm(booking_id, changed_by=changed_by)


@retry_on_storage_failure()
def expire(booking_id):
    return scheduler().expire(booking_id)


@retry_on_storage_failure()
def cancel(booking_id, actor='customer', reason=''):
    return scheduler().cancel(booking_id, actor=actor, reason=reason)


@retry_on_storage_failure()
def check_in(booking_id):
    return scheduler().check_in(booking_id)


@retry_on_storage_failure()
def mark_no_show(booking_id):
    return scheduler().mark_no_show(booking_id)


@retry_on_storage_failure()
def complete(booking_id):
    return scheduler().complete(booking_id)


@retry_on_storage_failure()
def sweep():
    return scheduler().sweep()
