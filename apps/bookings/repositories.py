"""
Collaborator contracts for the booking engine, and the ORM-backed booking
repository.

The availability calculator, slot generator and scheduler only ever talk to
these protocols; `engine.py` wires in the Django implementations, tests wire
in the in-memory fakes.
"""
import logging
from contextlib import contextmanager
from datetime import date as date_type, datetime
from typing import ContextManager, Iterable, List, Optional, Protocol

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, DataError, IntegrityError, transaction

from apps.businesses.models import Business

from .domain import (
    BookingRecord, BusinessInfo, NewBooking, OpeningHours, ServiceInfo,
)
from .exceptions import StorageFailure, ValidationError
from .lifecycle import ACTIVE_STATUSES, BookingStatus
from .models import Booking, BookingStatusLog

logger = logging.getLogger(__name__)


# ── Contracts ─────────────────────────────────────────────────────────────────

class BusinessHoursProvider(Protocol):
    def get_business(self, business_id) -> Optional[BusinessInfo]: ...

    def get_operating_hours(self, business_id, day: date_type) -> Optional[OpeningHours]:
        """Open interval for the date with exceptions applied; None when closed."""
        ...


class ServiceCatalog(Protocol):
    def get_service(self, service_id) -> Optional[ServiceInfo]: ...


class Notifier(Protocol):
    def booking_created(self, booking: BookingRecord) -> None: ...

    def booking_confirmed(self, booking: BookingRecord) -> None: ...

    def booking_cancelled(self, booking: BookingRecord) -> None: ...

    def booking_expired(self, booking: BookingRecord) -> None: ...


class BookingRepository(Protocol):
    def locked(self, business_id) -> ContextManager[None]:
        """Exclusive per-business section; everything inside commits or rolls back together."""
        ...

    def get(self, booking_id) -> Optional[BookingRecord]: ...

    def get_by_idempotency_key(self, business_id, key: str) -> Optional[BookingRecord]: ...

    def list_active(self, business_id, start_date: date_type, end_date: date_type,
                    now: datetime) -> List[BookingRecord]:
        """Confirmed bookings plus pending ones whose hold has not run out."""
        ...

    def list_overdue_holds(self, now: datetime, business_id=None,
                           booking_date: Optional[date_type] = None) -> List[BookingRecord]: ...

    def list_confirmed(self, until_date: date_type) -> List[BookingRecord]: ...

    def insert(self, booking: NewBooking, now: datetime) -> BookingRecord: ...

    def transition(self, booking_id, sources: Iterable[str], target: str, changed_by: str,
                   now: datetime, reason: str = '') -> bool:
        """Apply `target` only if the current status is one of `sources`."""
        ...

    def mark_checked_in(self, booking_id, now: datetime) -> bool: ...


# ── Django implementation ─────────────────────────────────────────────────────

class DjangoBookingRepository:
    """
    Booking persistence on the Django ORM.

    The per-business lock is a `SELECT ... FOR UPDATE` on the Business row, so
    reservations for different businesses never wait on each other.
    """

    @contextmanager
    def locked(self, business_id):
        try:
            with transaction.atomic():
                list(Business.all_objects.select_for_update().filter(pk=business_id).values_list('pk'))
                yield
        except DatabaseError as exc:
            logger.exception('Storage error inside booking lock for business %s', business_id)
            raise StorageFailure() from exc

    def get(self, booking_id) -> Optional[BookingRecord]:
        try:
            booking = Booking.objects.filter(pk=booking_id).first()
        except (ValueError, DjangoValidationError):
            return None
        except DatabaseError as exc:
            raise StorageFailure() from exc
        return booking.to_record() if booking else None

    def get_by_idempotency_key(self, business_id, key):
        try:
            booking = Booking.objects.filter(business_id=business_id, idempotency_key=key).first()
        except DatabaseError as exc:
            raise StorageFailure() from exc
        return booking.to_record() if booking else None

    def list_active(self, business_id, start_date, end_date, now):
        qs = (
            Booking.objects
            .filter(
                business_id=business_id,
                booking_date__gte=start_date,
                booking_date__lte=end_date,
                status__in=ACTIVE_STATUSES,
            )
            .exclude(status=BookingStatus.PENDING, hold_expires_at__lte=now)
            .order_by('booking_date', 'start_time')
        )
        return self._records(qs)

    def list_overdue_holds(self, now, business_id=None, booking_date=None):
        qs = Booking.objects.filter(status=BookingStatus.PENDING, hold_expires_at__lte=now)
        if business_id is not None:
            qs = qs.filter(business_id=business_id)
        if booking_date is not None:
            qs = qs.filter(booking_date=booking_date)
        return self._records(qs.order_by('hold_expires_at'))

    def list_confirmed(self, until_date):
        qs = Booking.objects.filter(
            status=BookingStatus.CONFIRMED, booking_date__lte=until_date,
        ).order_by('booking_date', 'start_time')
        return self._records(qs)

    def insert(self, booking: NewBooking, now: datetime) -> BookingRecord:
        try:
            with transaction.atomic():
                row = Booking.objects.create(
                    business_id=booking.business_id,
                    service_id=booking.service_id,
                    customer_id=booking.customer_id,
                    customer_name=booking.customer_name,
                    customer_email=booking.customer_email,
                    customer_phone=booking.customer_phone,
                    notes=booking.notes,
                    booking_date=booking.booking_date,
                    start_time=booking.start.time(),
                    end_time=booking.end.time(),
                    duration_minutes=int((booking.end - booking.start).total_seconds() // 60),
                    buffer_minutes=booking.buffer_minutes,
                    amount=booking.amount,
                    status=BookingStatus.PENDING,
                    status_changed_at=now,
                    idempotency_key=booking.idempotency_key,
                    hold_expires_at=booking.hold_expires_at,
                )
                BookingStatusLog.objects.create(
                    booking=row, from_status='', to_status=BookingStatus.PENDING,
                    changed_by='customer', reason='Reserved',
                )
        except (IntegrityError, DataError) as exc:
            logger.warning('Booking insert rejected for business %s: %s', booking.business_id, exc)
            raise ValidationError('The booking details could not be stored.') from exc
        except DatabaseError as exc:
            raise StorageFailure() from exc
        return row.to_record()

    def transition(self, booking_id, sources, target, changed_by, now, reason=''):
        sources = [str(s) for s in sources]
        fields = {'status': target, 'status_changed_at': now, 'updated_at': now}
        if target == BookingStatus.CANCELLED:
            fields['cancellation_reason'] = reason
            fields['cancelled_by'] = changed_by

        try:
            with transaction.atomic():
                current = (
                    Booking.objects.select_for_update()
                    .filter(pk=booking_id)
                    .values_list('status', flat=True)
                    .first()
                )
                if current not in sources:
                    return False
                updated = Booking.objects.filter(pk=booking_id, status__in=sources).update(**fields)
                if not updated:
                    return False
                BookingStatusLog.objects.create(
                    booking_id=booking_id, from_status=current, to_status=target,
                    changed_by=changed_by, reason=reason,
                )
        except DatabaseError as exc:
            raise StorageFailure() from exc
        return True

    def mark_checked_in(self, booking_id, now):
        try:
            updated = Booking.objects.filter(
                pk=booking_id, status=BookingStatus.CONFIRMED, checked_in_at__isnull=True,
            ).update(checked_in_at=now, updated_at=now)
        except DatabaseError as exc:
            raise StorageFailure() from exc
        return bool(updated)

    @staticmethod
    def _records(qs) -> List[BookingRecord]:
        try:
            return [b.to_record() for b in qs]
        except DatabaseError as exc:
            raise StorageFailure() from exc
