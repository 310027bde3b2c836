"""
management command: sweep_bookings

Applies the time-driven booking transitions:
  - pending holds past their deadline   → expired
  - confirmed, no check-in, grace over  → no_show (businesses requiring check-in)
  - confirmed, end time passed          → completed

Run via OS cron every minute:
  * * * * *  /path/to/venv/bin/python manage.py sweep_bookings
"""
from django.core.management.base import BaseCommand, CommandError

from apps.bookings import engine
from apps.bookings.exceptions import BookingEngineError


class Command(BaseCommand):
    help = 'Expire overdue holds, complete finished bookings and record no-shows'

    def handle(self, *args, **options):
        try:
            result = engine.sweep()
        except BookingEngineError as exc:
            raise CommandError(f'sweep_bookings failed: {exc.message}') from exc

        counts = result.as_counts()
        self.stdout.write(
            self.style.SUCCESS(
                f"sweep_bookings: expired {counts['expired']}, "
                f"completed {counts['completed']}, no-show {counts['no_show']}"
            )
        )
