"""
Seed management command.

Populates the database with demo data:
  - 1 business open Monday–Friday 09:00–17:00
  - 3 services (30/45/60 minutes, 15-minute buffer)

Usage:
    python manage.py seed_data
    python manage.py seed_data --flush   # wipe and re-seed
"""
from datetime import time
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.bookings.models import Booking
from apps.businesses.models import Business, BusinessHours, validate_timezone
from apps.services.models import Service


class Command(BaseCommand):
    help = 'Seed a demo business with weekly hours and services'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete all existing seed data before creating fresh records',
        )
        parser.add_argument(
            '--timezone', default='UTC',
            help='IANA timezone for the demo business (default: UTC)',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        try:
            validate_timezone(options['timezone'])
        except ValidationError as exc:
            raise CommandError(exc.messages[0]) from exc

        if options['flush']:
            self.stdout.write('Flushing existing data...')
            Booking.objects.all().delete()
            BusinessHours.objects.all().delete()
            Service.all_objects.all().hard_delete()
            Business.all_objects.all().hard_delete()

        self.stdout.write('Seeding business...')
        business, _ = Business.objects.get_or_create(
            name='Reservo Demo Studio',
            defaults={
                'timezone': options['timezone'],
                'email': 'studio@reservo.app',
                'phone': '+1 555 0100',
            },
        )
        for weekday in range(7):
            BusinessHours.objects.update_or_create(
                business=business, weekday=weekday,
                defaults={
                    'opens_at': time(9, 0),
                    'closes_at': time(17, 0),
                    'is_open': weekday < 5,
                },
            )
        self.stdout.write(self.style.SUCCESS('  ✔ business + weekly hours'))

        # ── Services ──────────────────────────────────────────────────────────
        self.stdout.write('Seeding services...')
        services_data = [
            ('Consultation', 30, Decimal('40.00')),
            ('Treatment', 45, Decimal('65.00')),
            ('Full Session', 60, Decimal('90.00')),
        ]
        for name, duration, price in services_data:
            Service.objects.get_or_create(
                business=business, name=name,
                defaults={'duration_minutes': duration, 'buffer_minutes': 15, 'price': price},
            )
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(services_data)} services'))

        self.stdout.write(self.style.SUCCESS(f'\nDone. Business id: {business.id}'))
