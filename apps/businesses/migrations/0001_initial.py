import apps.businesses.models
import datetime
import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Business',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('name', models.CharField(max_length=150)),
                ('timezone', models.CharField(default='UTC', help_text='IANA timezone name, e.g. America/Chicago', max_length=64, validators=[apps.businesses.models.validate_timezone])),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('booking_horizon_days', models.PositiveIntegerField(default=apps.businesses.models._default_horizon, help_text='How many days ahead customers may book.')),
                ('hold_timeout_minutes', models.PositiveIntegerField(default=apps.businesses.models._default_hold_timeout, help_text='Minutes an unpaid booking holds its slot before expiring.')),
                ('slot_step_minutes', models.PositiveIntegerField(blank=True, help_text='Slot grid spacing. Leave empty to step by the service duration.', null=True)),
                ('min_lead_minutes', models.PositiveIntegerField(default=0, help_text='Minimum notice before a same-day slot can be booked.')),
                ('require_check_in', models.BooleanField(default=False, help_text='Confirmed bookings without a check-in become no-shows after the grace period.')),
                ('no_show_grace_minutes', models.PositiveIntegerField(default=15)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
            ],
            options={
                'verbose_name': 'Business',
                'verbose_name_plural': 'Businesses',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='BusinessHours',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('weekday', models.IntegerField(choices=[(0, 'Monday'), (1, 'Tuesday'), (2, 'Wednesday'), (3, 'Thursday'), (4, 'Friday'), (5, 'Saturday'), (6, 'Sunday')])),
                ('opens_at', models.TimeField(default=datetime.time(9, 0))),
                ('closes_at', models.TimeField(default=datetime.time(17, 0))),
                ('is_open', models.BooleanField(default=True)),
                ('business', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hours', to='businesses.business')),
            ],
            options={
                'verbose_name': 'Business Hours',
                'verbose_name_plural': 'Business Hours',
                'ordering': ['weekday'],
                'unique_together': {('business', 'weekday')},
            },
        ),
        migrations.CreateModel(
            name='BusinessHoursException',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('date', models.DateField(db_index=True)),
                ('is_closed', models.BooleanField(default=True, help_text='Closed all day. Untick to set special hours.')),
                ('opens_at', models.TimeField(blank=True, null=True)),
                ('closes_at', models.TimeField(blank=True, null=True)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('business', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='hour_exceptions', to='businesses.business')),
            ],
            options={
                'verbose_name': 'Hours Exception',
                'verbose_name_plural': 'Hours Exceptions',
                'ordering': ['-date'],
                'unique_together': {('business', 'date')},
            },
        ),
    ]
