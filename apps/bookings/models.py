"""
Bookings app models:
  - Booking          : one reservation of a service at a business
  - BookingStatusLog : full audit trail of state transitions

Status changes never go through `Booking.save()`; the repository applies them
as conditional updates so concurrent transitions cannot both succeed.
"""
from datetime import datetime
from zoneinfo import ZoneInfo
from django.db import models
from django.core.validators import MinValueValidator
from apps.core.models import UUIDModel, TimestampedModel
from apps.businesses.models import Business
from apps.services.models import Service

from .domain import BookingRecord
from .lifecycle import BookingStatus


class Booking(UUIDModel, TimestampedModel):
    business = models.ForeignKey(Business, on_delete=models.PROTECT, related_name='bookings')
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name='bookings')

    # Owned by the identity subsystem; stored as an opaque reference.
    customer_id = models.CharField(max_length=64, db_index=True)
    customer_name = models.CharField(max_length=150, blank=True)
    customer_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=20, blank=True)
    notes = models.TextField(blank=True)

    # Wall-clock times in the business's timezone.
    booking_date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    duration_minutes = models.PositiveIntegerField(
        help_text='service.duration_minutes at time of booking',
    )
    buffer_minutes = models.PositiveIntegerField(
        default=0,
        help_text='service.buffer_minutes at time of booking',
    )
    amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=0,
        validators=[MinValueValidator(0)],
        help_text='service.price at time of booking',
    )

    status = models.CharField(
        max_length=20, choices=BookingStatus.choices,
        default=BookingStatus.PENDING, db_index=True,
    )
    status_changed_at = models.DateTimeField(null=True, blank=True)
    idempotency_key = models.CharField(max_length=128, null=True, blank=True)
    hold_expires_at = models.DateTimeField(null=True, blank=True, db_index=True)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    reminder_sent_at = models.DateTimeField(null=True, blank=True)

    cancellation_reason = models.TextField(blank=True)
    cancelled_by = models.CharField(max_length=80, blank=True)

    class Meta:
        verbose_name = 'Booking'
        verbose_name_plural = 'Bookings'
        ordering = ['-booking_date', '-start_time']
        constraints = [
            models.UniqueConstraint(
                fields=['business', 'idempotency_key'],
                condition=models.Q(idempotency_key__isnull=False),
                name='uq_booking_idempotency_key',
            )
        ]
        indexes = [
            models.Index(fields=['business', 'booking_date', 'status'], name='booking_calendar_idx'),
        ]

    def __str__(self):
        return f"#{self.id_short} | {self.service.name} | {self.booking_date} {self.start_time}"

    @property
    def id_short(self):
        """Returns the first 8 chars of UUID in uppercase."""
        return str(self.id)[:8].upper()

    @property
    def start_datetime(self):
        return datetime.combine(self.booking_date, self.start_time)

    @property
    def end_datetime(self):
        return datetime.combine(self.booking_date, self.end_time)

    def business_tz(self):
        return ZoneInfo(self.business.timezone)

    def to_record(self) -> BookingRecord:
        return BookingRecord(
            id=self.id,
            business_id=self.business_id,
            service_id=self.service_id,
            customer_id=self.customer_id,
            booking_date=self.booking_date,
            start=self.start_datetime,
            end=self.end_datetime,
            status=self.status,
            buffer_minutes=self.buffer_minutes,
            amount=self.amount,
            idempotency_key=self.idempotency_key,
            hold_expires_at=self.hold_expires_at,
            checked_in_at=self.checked_in_at,
            created_at=self.created_at,
            customer_name=self.customer_name,
            customer_email=self.customer_email,
            customer_phone=self.customer_phone,
            notes=self.notes,
            cancellation_reason=self.cancellation_reason,
        )


# ── Booking Audit Log ─────────────────────────────────────────────────────────

class BookingStatusLog(UUIDModel):
    """Immutable audit trail of every status transition on a booking."""
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name='status_logs')
    from_status = models.CharField(max_length=20, choices=BookingStatus.choices, blank=True)
    to_status = models.CharField(max_length=20, choices=BookingStatus.choices)
    changed_by = models.CharField(max_length=80, help_text='system / customer / admin / webhook')
    reason = models.TextField(blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Booking Status Log'
        verbose_name_plural = 'Booking Status Logs'
        ordering = ['changed_at']

    def __str__(self):
        return f"Booking {str(self.booking_id)[:8]}: {self.from_status or '—'} → {self.to_status}"
