"""
Slot listing for one (business, service, date).

Every grid point from the open time up to (not including) the close time is
returned, so the UI can render a stable grid with unavailable slots greyed
out. A slot is available when the whole service fits before closing, it is
not inside the lead-time window, and it clears every live booking's buffer.
"""
import logging
from datetime import date as date_type, datetime, timedelta
from typing import Callable, List, Optional

from django.utils import timezone

from . import intervals
from .availability import blocked_intervals, earliest_start, resolve_business_and_service
from .domain import Interval, TimeSlot
from .exceptions import PastDate, ValidationError
from .repositories import BookingRepository, BusinessHoursProvider, ServiceCatalog

logger = logging.getLogger(__name__)


class SlotGenerator:

    def __init__(self, bookings: BookingRepository, catalog: ServiceCatalog,
                 hours: BusinessHoursProvider, clock: Optional[Callable[[], datetime]] = None):
        self.bookings = bookings
        self.catalog = catalog
        self.hours = hours
        self.clock = clock or timezone.now

    def get_time_slots(self, business_id, service_id, day: date_type) -> List[TimeSlot]:
        if day is None:
            raise ValidationError('A date is required.', field='date')
        business, service = resolve_business_and_service(self.hours, self.catalog, business_id, service_id)

        now = self.clock()
        today = business.local_now(now).date()
        if day < today:
            raise PastDate('Cannot list slots for a past date.', field='date')
        if day > business.last_bookable_date(today):
            raise ValidationError(
                f'Bookings open at most {business.booking_horizon_days} days in advance.', field='date',
            )

        opening = self.hours.get_operating_hours(business.id, day)
        if opening is None:
            return []

        open_interval = opening.on(day)
        step = timedelta(minutes=business.step_for(service))
        duration = service.duration_minutes
        lead_from = earliest_start(business, now)
        blocks = blocked_intervals(self.bookings.list_active(business.id, day, day, now), service)

        slots = []
        current = open_interval.start
        while current < open_interval.end:
            candidate = Interval(current, intervals.add_minutes(current, duration))
            available = (
                candidate.end <= open_interval.end
                and current >= lead_from
                and not any(self._collides(candidate, block) for block in blocks)
            )
            slots.append(TimeSlot(current, intervals.format_time(current.time()), available))
            current += step

        logger.debug(
            'Slots for business %s service %s on %s: %d listed, %d available',
            business.id, service.id, day, len(slots), sum(1 for s in slots if s.available),
        )
        return slots

    @staticmethod
    def _collides(candidate: Interval, block: Interval) -> bool:
        # Blocks already carry the buffer.
        return intervals.overlaps(candidate, block)
