import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('bookings', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PaymentEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('event_id', models.CharField(max_length=100, unique=True)),
                ('event_type', models.CharField(db_index=True, max_length=60)),
                ('payment_reference', models.CharField(blank=True, max_length=100)),
                ('payload', models.JSONField(blank=True, null=True)),
                ('outcome', models.CharField(choices=[('confirmed', 'Booking confirmed'), ('noop', 'Booking already settled'), ('recorded', 'Recorded only'), ('unmatched', 'No matching booking')], max_length=12)),
                ('booking', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payment_events', to='bookings.booking')),
            ],
            options={
                'verbose_name': 'Payment Event',
                'verbose_name_plural': 'Payment Events',
                'ordering': ['-created_at'],
            },
        ),
    ]
