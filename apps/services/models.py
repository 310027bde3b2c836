"""
Service model — something a business sells by the appointment.

`duration_minutes` and `buffer_minutes` drive slot generation. Bookings copy
both (plus the price) when they are created, so later edits never move an
existing booking.
"""
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel
from apps.businesses.models import Business


def _default_buffer():
    return settings.BOOKING_DEFAULT_BUFFER_MINUTES


class Service(BaseModel):
    business = models.ForeignKey(Business, on_delete=models.CASCADE, related_name='services')
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    duration_minutes = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text='Session duration in minutes',
    )
    buffer_minutes = models.PositiveIntegerField(
        default=_default_buffer,
        help_text='Minimum gap kept free before and after each booking',
    )
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Service'
        verbose_name_plural = 'Services'
        ordering = ['name', 'duration_minutes']

    def __str__(self):
        return f"{self.name} ({self.duration_minutes} min) — {self.business.name}"

    @property
    def total_block_minutes(self):
        """Span a booking keeps clear: the buffer applies before and after it."""
        return self.duration_minutes + 2 * self.buffer_minutes
