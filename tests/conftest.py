"""
Shared fixtures.

Engine-level tests run against the in-memory fakes with a fixed clock:
Monday 2025-03-10 08:00 UTC. The default business is open Monday–Friday
09:00–17:00 and sells a 60-minute service with a 15-minute buffer.

ORM-backed tests use the `make_business` / `make_service` factories with the
real clock.
"""
import uuid
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest

from apps.bookings.availability import AvailabilityCalculator
from apps.bookings.domain import BusinessInfo, ServiceInfo
from apps.bookings.scheduler import BookingScheduler
from apps.bookings.slots import SlotGenerator

from .fakes import (
    FakeClock,
    InMemoryBookingRepository,
    RecordingNotifier,
    StaticHoursProvider,
    StaticServiceCatalog,
)

NOW = datetime(2025, 3, 10, 8, 0, tzinfo=dt_timezone.utc)
MONDAY = date(2025, 3, 10)
TUESDAY = date(2025, 3, 11)
SATURDAY = date(2025, 3, 15)

BUSINESS_ID = uuid.UUID('11111111-1111-1111-1111-111111111111')
SERVICE_ID = uuid.UUID('22222222-2222-2222-2222-222222222222')


def at(day: date, hour: int, minute: int = 0) -> datetime:
    """Naive business-local wall-clock time."""
    return datetime.combine(day, time(hour, minute))


# ── Engine fixtures (in-memory) ───────────────────────────────────────────────

@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def business():
    return BusinessInfo(id=BUSINESS_ID)


@pytest.fixture
def service():
    return ServiceInfo(
        id=SERVICE_ID, business_id=BUSINESS_ID, duration_minutes=60,
        buffer_minutes=15, name='Full Session', price=Decimal('90.00'),
    )


@pytest.fixture
def hours(business):
    provider = StaticHoursProvider(business)
    provider.open_weekdays(business.id, range(5), time(9, 0), time(17, 0))
    return provider


@pytest.fixture
def catalog(service):
    return StaticServiceCatalog(service)


@pytest.fixture
def repo():
    return InMemoryBookingRepository()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def scheduler(repo, catalog, hours, notifier, clock):
    return BookingScheduler(repo, catalog, hours, notifier=notifier, clock=clock)


@pytest.fixture
def slot_generator(repo, catalog, hours, clock):
    return SlotGenerator(repo, catalog, hours, clock=clock)


@pytest.fixture
def calculator(repo, catalog, hours, clock):
    return AvailabilityCalculator(repo, catalog, hours, clock=clock)


@pytest.fixture
def confirmed_booking(scheduler):
    """Confirmed 10:00–11:00 booking on Tuesday."""
    booking = scheduler.reserve(BUSINESS_ID, SERVICE_ID, 'cust-1', at(TUESDAY, 10))
    scheduler.confirm(booking.id)
    return booking


# ── ORM fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def make_business(db):
    from apps.businesses.models import Business, BusinessHours

    def factory(name='Test Studio', open_days=range(7), opens_at=time(9, 0), closes_at=time(17, 0), **fields):
        fields.setdefault('timezone', 'UTC')
        fields.setdefault('email', 'studio@example.com')
        biz = Business.objects.create(name=name, **fields)
        for weekday in open_days:
            BusinessHours.objects.create(business=biz, weekday=weekday, opens_at=opens_at, closes_at=closes_at)
        return biz

    return factory


@pytest.fixture
def make_service(db):
    from apps.services.models import Service

    def factory(business, name='Full Session', duration_minutes=60, buffer_minutes=15,
                price=Decimal('90.00'), **fields):
        return Service.objects.create(
            business=business, name=name, duration_minutes=duration_minutes,
            buffer_minutes=buffer_minutes, price=price, **fields,
        )

    return factory


@pytest.fixture
def next_week():
    """A date a week out, so ORM tests never run into 'today' edge cases."""
    from django.utils import timezone
    return timezone.localdate() + timedelta(days=7)
