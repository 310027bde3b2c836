"""
Plain value types passed between the booking engine components.

Nothing in here touches the database: repositories translate ORM rows into
these records, which keeps the availability and scheduling logic runnable
against the in-memory fakes used in tests.

All `datetime` values on these records are naive wall-clock times in the
owning business's timezone unless the field name says otherwise
(`*_at` fields are timezone-aware instants).
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from .exceptions import ValidationError

MAX_RANGE_DAYS = 366


@dataclass(frozen=True)
class Interval:
    """Closed-open interval [start, end)."""
    start: datetime
    end: datetime

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


@dataclass(frozen=True)
class OpeningHours:
    opens_at: time
    closes_at: time

    def on(self, day: date) -> Interval:
        return Interval(datetime.combine(day, self.opens_at), datetime.combine(day, self.closes_at))


@dataclass(frozen=True)
class BusinessInfo:
    id: object
    timezone: str = 'UTC'
    booking_horizon_days: int = 60
    hold_timeout_minutes: int = 15
    slot_step_minutes: Optional[int] = None
    min_lead_minutes: int = 0
    require_check_in: bool = False
    no_show_grace_minutes: int = 15

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def local_now(self, now: datetime) -> datetime:
        """Naive wall-clock time at the business for the aware instant `now`."""
        return now.astimezone(self.tzinfo).replace(tzinfo=None)

    def last_bookable_date(self, today: date) -> date:
        return today + timedelta(days=self.booking_horizon_days)

    def step_for(self, service: 'ServiceInfo') -> int:
        return self.slot_step_minutes or service.duration_minutes


@dataclass(frozen=True)
class ServiceInfo:
    id: object
    business_id: object
    duration_minutes: int
    buffer_minutes: int = 15
    active: bool = True
    name: str = ''
    price: Decimal = Decimal('0')


@dataclass(frozen=True)
class BookingRecord:
    id: object
    business_id: object
    service_id: object
    customer_id: str
    booking_date: date
    start: datetime
    end: datetime
    status: str
    buffer_minutes: int = 0
    amount: Decimal = Decimal('0')
    idempotency_key: Optional[str] = None
    hold_expires_at: Optional[datetime] = None
    checked_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    customer_name: str = ''
    customer_email: str = ''
    customer_phone: str = ''
    notes: str = ''
    cancellation_reason: str = ''

    @property
    def interval(self) -> Interval:
        return Interval(self.start, self.end)

    @property
    def duration_minutes(self) -> int:
        return self.interval.minutes

    def hold_expired(self, now: datetime) -> bool:
        return self.hold_expires_at is not None and self.hold_expires_at <= now


@dataclass(frozen=True)
class NewBooking:
    """Everything the scheduler hands a repository to insert."""
    business_id: object
    service_id: object
    customer_id: str
    booking_date: date
    start: datetime
    end: datetime
    buffer_minutes: int
    amount: Decimal
    hold_expires_at: datetime
    idempotency_key: Optional[str] = None
    customer_name: str = ''
    customer_email: str = ''
    customer_phone: str = ''
    notes: str = ''


@dataclass(frozen=True)
class TimeSlot:
    start: datetime
    display: str
    available: bool

    def to_dict(self) -> dict:
        return {
            'start': self.start.strftime('%H:%M'),
            'display': self.display,
            'available': self.available,
        }


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self):
        if self.start is None or self.end is None:
            raise ValidationError('Both start and end dates are required.', field='start')
        if self.end < self.start:
            raise ValidationError('End date must not be before start date.', field='end')
        if (self.end - self.start).days + 1 > MAX_RANGE_DAYS:
            raise ValidationError(f'Date range may span at most {MAX_RANGE_DAYS} days.', field='end')

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)


@dataclass
class SweepResult:
    expired: list = field(default_factory=list)
    completed: list = field(default_factory=list)
    no_show: list = field(default_factory=list)

    def as_counts(self) -> dict:
        return {
            'expired': len(self.expired),
            'completed': len(self.completed),
            'no_show': len(self.no_show),
        }
