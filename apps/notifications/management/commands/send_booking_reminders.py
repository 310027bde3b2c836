"""
management command: send_booking_reminders

Emails customers whose confirmed booking starts within the reminder window
(BOOKING_REMINDER_WINDOW_HOURS, default 24). Each booking is reminded once;
`reminder_sent_at` is stamped only when the email actually went out.

Run via OS cron every hour:
  0 * * * *  /path/to/venv/bin/python manage.py send_booking_reminders
"""
from datetime import timedelta
from zoneinfo import ZoneInfoNotFoundError

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.bookings.lifecycle import BookingStatus
from apps.bookings.models import Booking
from apps.notifications.emails import EmailNotifier


class Command(BaseCommand):
    help = 'Send reminder emails for confirmed bookings starting soon'

    def add_arguments(self, parser):
        parser.add_argument(
            '--hours', type=int, default=None,
            help='Reminder window in hours (defaults to BOOKING_REMINDER_WINDOW_HOURS)',
        )

    def handle(self, *args, **options):
        window = timedelta(hours=options['hours'] or settings.BOOKING_REMINDER_WINDOW_HOURS)
        now = timezone.now()
        notifier = EmailNotifier()

        candidates = (
            Booking.objects
            .filter(
                status=BookingStatus.CONFIRMED,
                reminder_sent_at__isnull=True,
                booking_date__gte=(now - timedelta(days=1)).date(),
                booking_date__lte=(now + window + timedelta(days=1)).date(),
            )
            .select_related('business')
        )

        sent = skipped = 0
        for booking in candidates:
            try:
                tz = booking.business_tz()
            except (ZoneInfoNotFoundError, ValueError):
                self.stderr.write(f'Skipping booking #{booking.id_short}: invalid timezone {booking.business.timezone!r}')
                skipped += 1
                continue
            starts_at = booking.start_datetime.replace(tzinfo=tz)
            if not now <= starts_at <= now + window:
                continue
            if notifier.booking_reminder(booking.to_record()):
                Booking.objects.filter(pk=booking.pk, reminder_sent_at__isnull=True).update(reminder_sent_at=now)
                sent += 1
            else:
                skipped += 1

        self.stdout.write(
            self.style.SUCCESS(f'send_booking_reminders: sent {sent}, skipped {skipped}')
        )
