"""
PaymentEvent — one row per payment-processor webhook event we have handled.

The booking engine never captures money; it only listens for the
processor's success signal and confirms the matching pending booking.
The unique `event_id` makes webhook redelivery a no-op.
"""
from django.db import models
from apps.core.models import UUIDModel, TimestampedModel
from apps.bookings.models import Booking


class PaymentEventOutcome(models.TextChoices):
    CONFIRMED = 'confirmed', 'Booking confirmed'
    NOOP      = 'noop',      'Booking already settled'
    RECORDED  = 'recorded',  'Recorded only'
    UNMATCHED = 'unmatched', 'No matching booking'


class PaymentEvent(UUIDModel, TimestampedModel):
    event_id = models.CharField(max_length=100, unique=True)
    event_type = models.CharField(max_length=60, db_index=True)
    booking = models.ForeignKey(
        Booking, on_delete=models.SET_NULL, null=True, blank=True, related_name='payment_events',
    )
    payment_reference = models.CharField(max_length=100, blank=True)
    payload = models.JSONField(null=True, blank=True)
    outcome = models.CharField(max_length=12, choices=PaymentEventOutcome.choices)

    class Meta:
        verbose_name = 'Payment Event'
        verbose_name_plural = 'Payment Events'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.event_type} {self.event_id} [{self.outcome}]"
