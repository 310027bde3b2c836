"""
Business models — the tenant a booking belongs to, its weekly operating hours,
and date-specific exceptions (closures and special hours).

These tables are owned by the business-profile screens; the booking engine
only reads them through `apps.businesses.hours.DjangoBusinessHoursProvider`.
"""
from datetime import time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from apps.core.models import BaseModel, UUIDModel, TimestampedModel

WEEKDAY_CHOICES = [
    (0, 'Monday'), (1, 'Tuesday'), (2, 'Wednesday'),
    (3, 'Thursday'), (4, 'Friday'), (5, 'Saturday'), (6, 'Sunday'),
]


def validate_timezone(value):
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f'"{value}" is not a known IANA timezone.') from exc


def _default_hold_timeout():
    return settings.BOOKING_HOLD_TIMEOUT_MINUTES


def _default_horizon():
    return settings.BOOKING_HORIZON_DAYS


class Business(BaseModel):
    name = models.CharField(max_length=150)
    timezone = models.CharField(
        max_length=64, default='UTC', validators=[validate_timezone],
        help_text='IANA timezone name, e.g. America/Chicago',
    )
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)

    # Booking policy
    booking_horizon_days = models.PositiveIntegerField(
        default=_default_horizon,
        help_text='How many days ahead customers may book.',
    )
    hold_timeout_minutes = models.PositiveIntegerField(
        default=_default_hold_timeout,
        help_text='Minutes an unpaid booking holds its slot before expiring.',
    )
    slot_step_minutes = models.PositiveIntegerField(
        null=True, blank=True,
        help_text='Slot grid spacing. Leave empty to step by the service duration.',
    )
    min_lead_minutes = models.PositiveIntegerField(
        default=0,
        help_text='Minimum notice before a same-day slot can be booked.',
    )
    require_check_in = models.BooleanField(
        default=False,
        help_text='Confirmed bookings without a check-in become no-shows after the grace period.',
    )
    no_show_grace_minutes = models.PositiveIntegerField(default=15)

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Business'
        verbose_name_plural = 'Businesses'
        ordering = ['name']

    def __str__(self):
        return self.name


class BusinessHours(models.Model):
    """Recurring weekly hours. A weekday without an open row is closed."""
    business = models.ForeignKey(Business, on_delete=models.CASCADE, related_name='hours')
    weekday = models.IntegerField(choices=WEEKDAY_CHOICES)
    opens_at = models.TimeField(default=time(9, 0))
    closes_at = models.TimeField(default=time(17, 0))
    is_open = models.BooleanField(default=True)

    class Meta:
        verbose_name = 'Business Hours'
        verbose_name_plural = 'Business Hours'
        unique_together = ('business', 'weekday')
        ordering = ['weekday']

    def __str__(self):
        if not self.is_open:
            return f"{self.business.name} - {self.get_weekday_display()}: Closed"
        return (
            f"{self.business.name} - {self.get_weekday_display()}: "
            f"{self.opens_at.strftime('%H:%M')}–{self.closes_at.strftime('%H:%M')}"
        )

    def clean(self):
        if self.is_open and self.opens_at >= self.closes_at:
            raise ValidationError('Closing time must be after opening time.')


class BusinessHoursException(UUIDModel, TimestampedModel):
    """Overrides the weekly hours for one calendar date."""
    business = models.ForeignKey(Business, on_delete=models.CASCADE, related_name='hour_exceptions')
    date = models.DateField(db_index=True)
    is_closed = models.BooleanField(default=True, help_text='Closed all day. Untick to set special hours.')
    opens_at = models.TimeField(null=True, blank=True)
    closes_at = models.TimeField(null=True, blank=True)
    reason = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = 'Hours Exception'
        verbose_name_plural = 'Hours Exceptions'
        unique_together = [('business', 'date')]
        ordering = ['-date']

    def __str__(self):
        if self.is_closed:
            return f"{self.business.name} — Closed on {self.date}"
        return f"{self.business.name} — Special hours on {self.date}"

    def clean(self):
        if self.is_closed:
            return
        if self.opens_at is None or self.closes_at is None:
            raise ValidationError('Special hours need both an opening and a closing time.')
        if self.opens_at >= self.closes_at:
            raise ValidationError('Closing time must be after opening time.')
