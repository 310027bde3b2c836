"""
Date-level availability: which days in a range still have at least one
bookable start time for a service.

Read path only. Results can be stale by the time the customer picks a slot;
the scheduler re-validates under the business lock at commit time.
"""
import logging
from collections import defaultdict
from datetime import date as date_type, datetime
from typing import Callable, Iterable, List, Optional, Set, Tuple

from django.utils import timezone

from . import intervals
from .domain import BookingRecord, BusinessInfo, DateRange, Interval, ServiceInfo
from .exceptions import InvalidService, ValidationError
from .repositories import BookingRepository, BusinessHoursProvider, ServiceCatalog

logger = logging.getLogger(__name__)


# ── Shared helpers (also used by slots.py and scheduler.py) ──────────────────

def resolve_business_and_service(hours: BusinessHoursProvider, catalog: ServiceCatalog,
                                 business_id, service_id) -> Tuple[BusinessInfo, ServiceInfo]:
    if not business_id:
        raise ValidationError('A business is required.', field='business_id')
    if not service_id:
        raise ValidationError('A service is required.', field='service_id')

    business = hours.get_business(business_id)
    if business is None:
        raise ValidationError('Unknown business.', field='business_id')

    service = catalog.get_service(service_id)
    if service is None or not service.active or str(service.business_id) != str(business.id):
        raise InvalidService(field='service_id')
    return business, service


def blocked_intervals(bookings: Iterable[BookingRecord], service: ServiceInfo) -> List[Interval]:
    """
    Each booking widened by the buffer that separates it from `service`.

    The separation is the larger of the two buffers, so a booking with a long
    buffer keeps its gap even against a service that declares a short one.
    """
    return [
        intervals.expand(b.interval, max(service.buffer_minutes, b.buffer_minutes))
        for b in bookings
    ]


def earliest_start(business: BusinessInfo, now: datetime) -> datetime:
    """First wall-clock moment a booking may start at, given the lead time."""
    return intervals.add_minutes(business.local_now(now), business.min_lead_minutes)


def has_free_start(window: Interval, origin: datetime, blocks: List[Interval],
                   duration_minutes: int, step_minutes: int) -> bool:
    """True if some grid point t in `window` leaves [t, t+duration) clear of every block."""
    for gap in intervals.subtract_intervals(window, blocks):
        start = intervals.align_up(gap.start, step_minutes, origin)
        if intervals.add_minutes(start, duration_minutes) <= gap.end:
            return True
    return False


# ── AvailabilityCalculator ────────────────────────────────────────────────────

class AvailabilityCalculator:

    def __init__(self, bookings: BookingRepository, catalog: ServiceCatalog,
                 hours: BusinessHoursProvider, clock: Optional[Callable[[], datetime]] = None):
        self.bookings = bookings
        self.catalog = catalog
        self.hours = hours
        self.clock = clock or timezone.now

    def get_available_dates(self, business_id, service_id, date_range: DateRange) -> Set[date_type]:
        if not isinstance(date_range, DateRange):
            raise ValidationError('A date range is required.', field='start')
        business, service = resolve_business_and_service(self.hours, self.catalog, business_id, service_id)

        now = self.clock()
        today = business.local_now(now).date()
        first = max(date_range.start, today)
        last = min(date_range.end, business.last_bookable_date(today))
        if first > last:
            return set()

        by_date = defaultdict(list)
        for booking in self.bookings.list_active(business.id, first, last, now):
            by_date[booking.booking_date].append(booking)

        lead_from = earliest_start(business, now)
        step = business.step_for(service)
        available = set()

        for day in DateRange(first, last).days():
            opening = self.hours.get_operating_hours(business.id, day)
            if opening is None:
                continue
            open_interval = opening.on(day)
            window = Interval(max(open_interval.start, lead_from), open_interval.end)
            if window.start >= window.end:
                continue

            day_bookings = by_date.get(day, [])
            if not day_bookings and window.start == open_interval.start:
                # Nothing booked and no lead-time clipping: the open time itself is a grid point.
                if open_interval.minutes >= service.duration_minutes:
                    available.add(day)
                continue

            if has_free_start(window, open_interval.start, blocked_intervals(day_bookings, service),
                              service.duration_minutes, step):
                available.add(day)

        logger.debug(
            'Availability for business %s service %s %s..%s: %d dates',
            business.id, service.id, first, last, len(available),
        )
        return available
