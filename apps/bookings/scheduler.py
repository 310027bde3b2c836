"""
BookingScheduler — the only write path for bookings.

reserve():
  1. Validate the request against the business, service and calendar (no writes).
  2. Expire overdue holds on that business/date so their intervals free up.
  3. Under the per-business lock: re-check the idempotency key, re-validate
     overlap against live bookings, insert a pending hold.
  4. Notify after the lock is released.

Lifecycle transitions (confirm, expire, cancel, mark_no_show, complete) are
conditional updates: whichever transition lands first wins and the loser gets
False back, never an error.
"""
import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Callable, Optional

from django.utils import timezone

from . import intervals
from .availability import earliest_start, resolve_business_and_service
from .domain import BookingRecord, BusinessInfo, Interval, NewBooking, SweepResult
from .exceptions import (
    BookingNotFound,
    OutOfBusinessHours,
    PastDate,
    SlotUnavailable,
    ValidationError,
)
from .lifecycle import BookingStatus, sources_for
from .repositories import BookingRepository, BusinessHoursProvider, Notifier, ServiceCatalog

logger = logging.getLogger(__name__)


class BookingScheduler:

    def __init__(self, bookings: BookingRepository, catalog: ServiceCatalog,
                 hours: BusinessHoursProvider, notifier: Optional[Notifier] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.bookings = bookings
        self.catalog = catalog
        self.hours = hours
        self.notifier = notifier
        self.clock = clock or timezone.now

    # ── Reservation ───────────────────────────────────────────────────────────

    def reserve(self, business_id, service_id, customer_id, start_time: datetime,
                idempotency_key: Optional[str] = None, *, customer_name: str = '',
                customer_email: str = '', customer_phone: str = '', notes: str = '') -> BookingRecord:
        """
        Place a pending hold on [start_time, start_time + duration).

        `start_time` is wall-clock time at the business; an aware datetime is
        converted to the business's timezone first. Raises SlotUnavailable
        when another live booking got there first.
        """
        if not customer_id:
            raise ValidationError('A customer is required.', field='customer_id')
        if start_time is None:
            raise ValidationError('A start time is required.', field='start_time')

        business, service = resolve_business_and_service(self.hours, self.catalog, business_id, service_id)

        if idempotency_key:
            existing = self.bookings.get_by_idempotency_key(business.id, idempotency_key)
            if existing is not None:
                logger.info('Idempotent replay of booking %s (key %s)', existing.id, idempotency_key)
                return existing

        start = self._to_local(business, start_time)
        now = self.clock()
        requested = self._validate_request(business, service, start, now)
        day = start.date()

        self._expire_overdue(now, business.id, day)

        with self.bookings.locked(business.id):
            if idempotency_key:
                existing = self.bookings.get_by_idempotency_key(business.id, idempotency_key)
                if existing is not None:
                    return existing

            for booking in self.bookings.list_active(business.id, day, day, now):
                gap = max(service.buffer_minutes, booking.buffer_minutes)
                if intervals.overlaps(requested, booking.interval, gap):
                    logger.info(
                        'Slot conflict for business %s at %s: held by booking %s',
                        business.id, start, booking.id,
                    )
                    raise SlotUnavailable(field='start_time')

            record = self.bookings.insert(
                NewBooking(
                    business_id=business.id,
                    service_id=service.id,
                    customer_id=str(customer_id),
                    booking_date=day,
                    start=requested.start,
                    end=requested.end,
                    buffer_minutes=service.buffer_minutes,
                    amount=service.price,
                    hold_expires_at=now + timedelta(minutes=business.hold_timeout_minutes),
                    idempotency_key=idempotency_key or None,
                    customer_name=customer_name or '',
                    customer_email=customer_email or '',
                    customer_phone=customer_phone or '',
                    notes=notes or '',
                ),
                now,
            )

        logger.info(
            'Booking %s held for business %s on %s %s-%s (expires %s)',
            record.id, business.id, day, record.start.time(), record.end.time(), record.hold_expires_at,
        )
        self._notify('booking_created', record)
        return record

    def _validate_request(self, business: BusinessInfo, service, start: datetime, now: datetime) -> Interval:
        day = start.date()
        local_now = business.local_now(now)

        if start < local_now:
            raise PastDate(field='start_time')
        if day > business.last_bookable_date(local_now.date()):
            raise ValidationError(
                f'Bookings open at most {business.booking_horizon_days} days in advance.', field='start_time',
            )

        opening = self.hours.get_operating_hours(business.id, day)
        if opening is None:
            raise OutOfBusinessHours('The business is closed on this date.', field='start_time')
        open_interval = opening.on(day)
        requested = Interval(start, intervals.add_minutes(start, service.duration_minutes))
        if requested.start < open_interval.start or requested.end > open_interval.end:
            raise OutOfBusinessHours(field='start_time')

        if not intervals.is_aligned(start, business.step_for(service), open_interval.start):
            raise ValidationError('Start time is not on the booking grid.', field='start_time')
        if start < earliest_start(business, now):
            raise ValidationError(
                f'Bookings need at least {business.min_lead_minutes} minutes notice.', field='start_time',
            )
        return requested

    @staticmethod
    def _to_local(business: BusinessInfo, start_time: datetime) -> datetime:
        if start_time.tzinfo is not None:
            return start_time.astimezone(business.tzinfo).replace(tzinfo=None)
        return start_time

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def confirm(self, booking_id, changed_by: str = 'webhook') -> bool:
        """pending → confirmed. A late confirmation still wins if expiry has not landed yet."""
        self._get(booking_id)
        return self._apply(booking_id, BookingStatus.CONFIRMED, changed_by, 'Payment confirmed',
                           event='booking_confirmed')

    def expire(self, booking_id) -> bool:
        booking = self._get(booking_id)
        if booking.status != BookingStatus.PENDING or not booking.hold_expired(self.clock()):
            return False
        return self._apply(booking_id, BookingStatus.EXPIRED, 'system', 'Hold expired',
                           event='booking_expired')

    def cancel(self, booking_id, actor: str = 'customer', reason: str = '') -> bool:
        self._get(booking_id)
        return self._apply(booking_id, BookingStatus.CANCELLED, actor, reason,
                           event='booking_cancelled')

    def check_in(self, booking_id) -> bool:
        self._get(booking_id)
        checked_in = self.bookings.mark_checked_in(booking_id, self.clock())
        if checked_in:
            logger.info('Booking %s checked in', booking_id)
        return checked_in

    def mark_no_show(self, booking_id) -> bool:
        """confirmed → no_show, only for a customer who never checked in."""
        booking = self._get(booking_id)
        if booking.checked_in_at is not None:
            return False
        business = self._business_for(booking)
        if business.local_now(self.clock()) < booking.start:
            return False
        return self._apply(booking_id, BookingStatus.NO_SHOW, 'system', 'Customer did not arrive')

    def complete(self, booking_id) -> bool:
        booking = self._get(booking_id)
        business = self._business_for(booking)
        if business.local_now(self.clock()) < booking.end:
            return False
        return self._apply(booking_id, BookingStatus.COMPLETED, 'system', 'Appointment finished')

    def sweep(self) -> SweepResult:
        """
        Background pass over time-driven transitions.

        Expires overdue holds, marks no-shows where the business requires a
        check-in and the grace period has passed, and completes confirmed
        bookings whose end time has passed.
        """
        now = self.clock()
        result = SweepResult()
        result.expired.extend(self._expire_overdue(now))

        businesses = {}
        # Local dates never run more than one day ahead of UTC.
        until = now.astimezone(dt_timezone.utc).date() + timedelta(days=1)
        for booking in self.bookings.list_confirmed(until):
            key = str(booking.business_id)
            if key not in businesses:
                try:
                    businesses[key] = self._business_for(booking)
                except ValidationError as exc:
                    logger.error('Sweep skipping bookings of business %s: %s', booking.business_id, exc.message)
                    businesses[key] = None
            business = businesses[key]
            if business is None:
                continue
            local_now = business.local_now(now)

            if business.require_check_in and booking.checked_in_at is None:
                # Awaiting check-in: the booking can only end as a no-show.
                grace_deadline = intervals.add_minutes(booking.start, business.no_show_grace_minutes)
                if local_now >= grace_deadline and self._apply(
                        booking.id, BookingStatus.NO_SHOW, 'system', 'No check-in within grace period'):
                    result.no_show.append(booking.id)
            elif local_now >= booking.end:
                if self._apply(booking.id, BookingStatus.COMPLETED, 'system', 'Appointment finished'):
                    result.completed.append(booking.id)

        if any(result.as_counts().values()):
            logger.info('Booking sweep: %s', result.as_counts())
        return result

    # ── Internals ─────────────────────────────────────────────────────────────

    def _expire_overdue(self, now: datetime, business_id=None, day=None) -> list:
        expired = []
        for booking in self.bookings.list_overdue_holds(now, business_id=business_id, booking_date=day):
            if self._apply(booking.id, BookingStatus.EXPIRED, 'system', 'Hold expired', event='booking_expired'):
                expired.append(booking.id)
        return expired

    def _apply(self, booking_id, target: str, changed_by: str, reason: str = '',
               event: Optional[str] = None) -> bool:
        applied = self.bookings.transition(
            booking_id, sources_for(target), target, changed_by, self.clock(), reason=reason,
        )
        if not applied:
            logger.debug('Transition of booking %s to %s was a no-op', booking_id, target)
            return False

        logger.info('Booking %s → %s (by %s)', booking_id, target, changed_by)
        if event:
            record = self.bookings.get(booking_id)
            if record is not None:
                self._notify(event, record)
        return True

    def _get(self, booking_id) -> BookingRecord:
        booking = self.bookings.get(booking_id) if booking_id else None
        if booking is None:
            raise BookingNotFound(field='booking_id')
        return booking

    def _business_for(self, booking: BookingRecord) -> BusinessInfo:
        business = self.hours.get_business(booking.business_id)
        if business is None:
            logger.warning('Business %s for booking %s is gone; using UTC', booking.business_id, booking.id)
            return BusinessInfo(id=booking.business_id)
        return business

    def _notify(self, event: str, booking: BookingRecord) -> None:
        """Fire-and-forget: a failed notification never undoes a booking change."""
        if self.notifier is None:
            return
        try:
            getattr(self.notifier, event)(booking)
        except Exception:
            logger.exception('Notification %s failed for booking %s', event, booking.id)
