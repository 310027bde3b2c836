"""
Email notifications for booking lifecycle events.

All sends are synchronous (no task queue); the scheduler calls the notifier
after a transition has been committed. Every message goes to the customer
and a short summary goes to the business inbox.

Public API:
  EmailNotifier().booking_created(booking)
  EmailNotifier().booking_confirmed(booking)
  EmailNotifier().booking_cancelled(booking)
  EmailNotifier().booking_expired(booking)
  EmailNotifier().booking_reminder(booking)
"""
import logging
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from apps.bookings.intervals import format_time
from apps.businesses.models import Business
from apps.services.models import Service

logger = logging.getLogger(__name__)

SUBJECTS = {
    'booking_created':   'Booking Received — {service} on {date}',
    'booking_confirmed': 'Booking Confirmed — {service} on {date}',
    'booking_cancelled': 'Booking Cancelled — {service} on {date}',
    'booking_expired':   'Booking Hold Expired — {service} on {date}',
    'booking_reminder':  'Reminder: {service} on {date} at {time}',
}

BUSINESS_EVENT_LABELS = {
    'booking_created':   'New booking (awaiting payment)',
    'booking_confirmed': 'Booking confirmed',
    'booking_cancelled': 'Booking cancelled',
    'booking_expired':   'Booking hold expired',
}


def _booking_context(booking, business, service) -> dict:
    """Common template context for all booking emails."""
    return {
        'customer_name':  booking.customer_name or 'there',
        'customer_label': booking.customer_name or booking.customer_id,
        'customer_email': booking.customer_email,
        'customer_phone': booking.customer_phone,
        'service_name':   service.name if service else 'your appointment',
        'business_name':  business.name if business else '',
        'business_email': business.email if business else '',
        'business_phone': business.phone if business else '',
        'booking_date':   booking.booking_date,
        'start_time':     format_time(booking.start.time()),
        'end_time':       format_time(booking.end.time()),
        'duration':       booking.duration_minutes,
        'amount':         booking.amount,
        'status':         booking.status,
        'notes':          booking.notes,
        'hold_expires_at': booking.hold_expires_at,
        'cancellation_reason': booking.cancellation_reason or 'No reason given',
        'booking_ref':    str(booking.id)[:8].upper(),
        'booking_url':    _booking_url(booking),
        'support_email':  settings.DEFAULT_FROM_EMAIL,
    }


def _booking_url(booking) -> str:
    base = getattr(settings, 'SITE_URL', 'http://127.0.0.1:8000')
    return f"{base}/bookings/api/booking/{booking.id}/"


def _send(subject: str, to_email: str, html_template: str, txt_template: str, context: dict):
    """Low-level send helper — builds multipart email with HTML + text fallback."""
    if not to_email:
        logger.warning('Email skipped — no address (booking ref %s)', context.get('booking_ref'))
        return False

    try:
        text_body = render_to_string(txt_template, context)
        html_body = render_to_string(html_template, context)

        msg = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to_email],
        )
        msg.attach_alternative(html_body, 'text/html')
        msg.send(fail_silently=False)
        logger.info('Email "%s" sent to %s', subject, to_email)
        return True
    except Exception as exc:
        # Log but never crash the booking flow due to email failure
        logger.exception('Failed to send email "%s" to %s: %s', subject, to_email, exc)
        return False


class EmailNotifier:
    """Notifier backed by Django's email framework."""

    def booking_created(self, booking):
        self._dispatch('booking_created', booking)

    def booking_confirmed(self, booking):
        self._dispatch('booking_confirmed', booking)

    def booking_cancelled(self, booking):
        self._dispatch('booking_cancelled', booking)

    def booking_expired(self, booking):
        self._dispatch('booking_expired', booking)

    def booking_reminder(self, booking) -> bool:
        """Customer-only reminder. Returns True if the email went out."""
        ctx, _ = self._context(booking)
        return _send(
            subject=self._subject('booking_reminder', ctx),
            to_email=booking.customer_email,
            html_template='emails/booking_reminder.html',
            txt_template='emails/booking_reminder.txt',
            context=ctx,
        )

    # ── Internals ─────────────────────────────────────────────────────────────

    def _dispatch(self, event, booking):
        ctx, business = self._context(booking)

        _send(
            subject=self._subject(event, ctx),
            to_email=booking.customer_email,
            html_template=f'emails/{event}.html',
            txt_template=f'emails/{event}.txt',
            context=ctx,
        )

        if business is not None and business.email:
            ctx = dict(ctx, event_label=BUSINESS_EVENT_LABELS[event])
            _send(
                subject=f"[{business.name}] {ctx['event_label']} — #{ctx['booking_ref']}",
                to_email=business.email,
                html_template='emails/business_booking_update.html',
                txt_template='emails/business_booking_update.txt',
                context=ctx,
            )

    @staticmethod
    def _context(booking):
        business = Business.all_objects.filter(pk=booking.business_id).first()
        service = Service.all_objects.filter(pk=booking.service_id).first()
        return _booking_context(booking, business, service), business

    @staticmethod
    def _subject(event, ctx):
        return SUBJECTS[event].format(
            service=ctx['service_name'],
            date=ctx['booking_date'].strftime('%d %b %Y'),
            time=ctx['start_time'],
        )
